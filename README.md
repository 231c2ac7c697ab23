# flkr

flkr scans a repository and works out which application stack it uses: language,
language version, package manager, framework, build and start commands, output
directory, port, environment variable names, lockfile and project version.

Supported ecosystems: Node.js, Python, Go, Rust, Ruby, Elixir, PHP and Java.

## Installation

```
pip install .
```

## Command line

Detect the stack of the current directory:

```
flkr detect
```

Detect the stack of another directory and print it as JSON (the `--json` and
`-v/--verbose` flags may be given before or after the subcommand):

```
flkr --json detect path/to/project
```

Print the version:

```
flkr version
```

Example output of `flkr detect`:

```
Language:        node
Version:         20.0.0
Package Manager: npm
Framework:       nextjs
Build Command:   next build
Start Command:   next start
Output Dir:      .next
Port:            3000
Confidence:      90%
```

The JSON form uses camel-case keys (`language`, `packageManager`, `buildCommand`,
`hasLockfile`, `confidence`, ...) and leaves out optional fields that are empty.

If no stack is found, `flkr detect` prints `no application stack detected` to
standard error and exits with status 1. A manifest that cannot be read or parsed
(for example a malformed `package.json`) is reported as `Error: ...`, also with
status 1.

## Library use

```python
from flkr.registry import Registry

profile = Registry().detect_from_path("path/to/project")
if profile is not None:
    print(profile.language, profile.framework, profile.port)
    print(profile.to_dict())
```

- `Registry.detect_all(root)` runs every detector in priority order and returns all
  matching `AppProfile` objects, highest confidence first.
- `Registry.detect_best(root)` returns the best one, enriched with the variable names
  from `.env.example` and the `web:` command from a `Procfile`
  (see `CrosscuttingDetector` in `flkr.core`).
- `flkr.api.detect(DetectOptions(path=...))` checks that the path is an accessible
  directory (raising `OSError` or `NotADirectoryError` otherwise) and then returns
  the best profile, or `None`.

Each detector can be used on its own: `NodeDetector`, `PythonDetector`,
`RubyDetector` and `PHPDetector` in `flkr.scripting`; `GoDetector`, `RustDetector`,
`JavaDetector` and `ElixirDetector` in `flkr.compiled`. Each has a `detect(root)`
method that returns an `AppProfile` or `None`.

`AppProfile` (in `flkr.profile`) offers `validate()`, which raises
`InvalidProfileError` when the language or package manager is missing or the
confidence is outside 0..1, `merge(other)`, which overlays the set fields of another
profile, and `to_dict()`, which gives the JSON form.

The manifest parsers (`package.json`, `composer.json`, `pyproject.toml`,
`Cargo.toml`, `rust-toolchain.toml`, `pom.xml`, `.env` files) and `detect_lockfile`
are in `flkr.parsers`.

For Go projects without a `vendor/` directory, `flkr.nixhash.go_vendor_hash`
computes the `vendorHash` by running `go mod vendor` and `nix hash path`; both tools
must be on `PATH`, and failures raise `NixHashError`.

## What this package does not do

flkr reports the detected stack; it does not write a `flake.nix`. There is no
`generate` command and no interactive setup wizard. `GenerateOptions` in
`flkr.profile` only holds generation settings; nothing in the package uses them to
render a flake.

## Tests

```
pip install .[test]
pytest
```