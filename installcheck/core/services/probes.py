"""
Probe programs — minimal scripts that prove an install is usable.

Each probe loads the installed package (the whole namespace, or one
sub-module), calls one numeric function and exits non-zero if loading
fails or the result is not a number.  Probes come in two flavors:
CommonJS (``require``) and ES module (``import``, ``.mjs``).
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from installcheck.core.models.settings import TargetPackage


@dataclass(frozen=True)
class Probe:
    """A probe program to write into the working directory and run."""

    name: str
    filename: str
    source: str


_CHECK = """\
if ( typeof out !== 'number' ) {{
\tthrow new TypeError( 'expected a number, got ' + ( typeof out ) );
}}
console.log( {label} + ' => ' + out );
"""


def _accessor(path: str) -> str:
    """``"math.base.special.sin"`` → ``["math"]["base"]["special"]["sin"]``."""
    return "".join(f"[{json.dumps(part)}]" for part in path.split(".") if part)


def _check(label: str) -> str:
    return _CHECK.format(label=json.dumps(label))


def namespace_probe(target: TargetPackage, esm: bool = False) -> Probe:
    """Load the whole namespace and call ``target.namespace_function``."""
    pkg = json.dumps(target.package)
    call = f"ns{_accessor(target.namespace_function)}( {target.probe_argument!r} )"
    label = f"{target.package}:{target.namespace_function}"

    if esm:
        source = f"import ns from {pkg};\n\nvar out = {call};\n" + _check(label)
        return Probe(name="namespace-esm", filename="namespace.mjs", source=source)

    source = f"'use strict';\n\nvar ns = require( {pkg} );\n\nvar out = {call};\n" + _check(label)
    return Probe(name="namespace", filename="namespace.js", source=source)


def submodule_probe(target: TargetPackage, esm: bool = False) -> Probe:
    """Load one sub-module directly and call it."""
    call = f"fn( {target.probe_argument!r} )"
    label = target.submodule

    if esm:
        specifier = f"{target.submodule.rstrip('/')}/{target.submodule_entry.lstrip('/')}"
        source = f"import fn from {json.dumps(specifier)};\n\nvar out = {call};\n" + _check(label)
        return Probe(name="submodule-esm", filename="submodule.mjs", source=source)

    source = (
        f"'use strict';\n\nvar fn = require( {json.dumps(target.submodule)} );\n\n"
        f"var out = {call};\n" + _check(label)
    )
    return Probe(name="submodule", filename="submodule.js", source=source)


def probes_for(target: TargetPackage, esm: bool) -> list[Probe]:
    """All probes for a local install, CommonJS first."""
    probes = [namespace_probe(target), submodule_probe(target)]
    if esm:
        probes += [namespace_probe(target, esm=True), submodule_probe(target, esm=True)]
    return probes


def manifest(name: str = "installcheck-sandbox") -> str:
    """Minimal package.json for the isolated working directory."""
    data = {
        "name": name,
        "version": "0.0.0",
        "private": True,
        "description": "Scratch project for install verification.",
    }
    return json.dumps(data, indent=2) + "\n"
