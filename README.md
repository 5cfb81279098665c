# datree

Building blocks for checking Kubernetes manifests against policies.

It needs Python 3.10 or later and depends on `pyyaml` and `jsonschema`.

## What is in the package

- `datree.schema_validator` – `JSONSchemaValidator` validates a YAML or JSON
  document against a JSON Schema (format checks switched on) and returns a
  list of `DetailedError` values, one per leaf error, each with
  `keyword_location`, `instance_location` and `error`. Besides the standard
  keywords it understands `resourceMinimum` and `resourceMaximum`, which
  compare Kubernetes resource quantities such as `500m` or `1G`.
- `datree.extensions` – the rule keywords `customKeyRule81` (memory requests
  and limits must be set and equal), `customKeyRule89` (host-path volumes
  must be mounted read-only) and `customKeyRule101` (role rules must not allow
  creating pods). They are registered with `JSONSchemaValidator`
  automatically.
- `datree.quantity` – `parse_quantity` turns a quantity string such as
  `100m`, `2Gi` or `2e3` into an exact `Decimal`, raising `QuantityError`
  for malformed input.
- `datree.printer` and `datree.theme` – `Printer` renders per-file warnings,
  skipped and failed rules, evaluation summaries and bordered summary tables,
  using the coloured theme from `create_default_theme` or the plain ASCII
  theme from `create_simple_theme`.
- `datree.local_config` – `LocalConfigClient` reads and writes
  `config.yaml` in a configuration directory (`~/.datree` by default),
  filling in the offline mode, a token and a client id on first use.
  Environment variables named `DATREE_<KEY>` override stored values.
- `datree.http_client` – `Client` sends JSON requests relative to a base URL,
  gzips request bodies, merges default headers, and raises `HttpError` for
  status codes above 399.
- `datree.network_validator` – `NetworkValidator` decides whether a network
  failure should stop the run (`OfflineModeError`) or switch to local mode.
- `datree.utils` and `datree.upgrade_manager` – network-error detection,
  argument checks, usage-example formatting, OS information, opening a URL
  in a browser, and brew detection and upgrading.

## Validating a document against a schema

```python
from datree.schema_validator import JSONSchemaValidator

schema = """
properties:
  spec:
    properties:
      memory:
        resourceMaximum: 500m
"""

manifest = """
spec:
  memory: 1G
"""

for error in JSONSchemaValidator().validate_yaml_schema(schema, manifest):
    print(error.instance_location, "-", error.error)
# /spec/memory - 1G is greater then resourceMaximum 500m
```

An empty list means the document passes. Malformed YAML or JSON raises
`ValueError`; a schema that does not check out raises
`jsonschema.exceptions.SchemaError`.

## Deciding what to do when the network fails

```python
from datree.network_validator import NetworkValidator, OfflineModeError

validator = NetworkValidator()
validator.set_offline_mode("local")

try:
    validator.identify_network_error(ConnectionRefusedError("connection refused"))
except OfflineModeError as exc:
    print(exc)

print(validator.is_local_mode())  # True
```

In the default `"fail"` mode a network error raises `OfflineModeError`, with
a hint on how to switch to offline mode; in `"local"` mode it is absorbed and
`is_backend_available` becomes `False`.

## Rendering a report

```python
from datree.printer import Printer, get_file_name_text
from datree.theme import create_simple_theme

printer = Printer()
printer.set_theme(create_simple_theme())

print(printer.get_title_text(get_file_name_text("k8s-demo.yaml")), end="")
print(printer.get_yaml_validation_summary_text(4, 5), end="")
```

`Printer.get_warnings_text` turns a list of `Warning` objects – each holding
its `FailedRule`s, skipped rules, YAML and Kubernetes validation results –
into the full per-file report, and `Printer.get_evaluation_summary_text`
produces the closing summary. `Printer` writes to standard output and
standard error unless given other streams as `out` and `err`. The default
theme colours text only when standard output is a terminal and `NO_COLOR`
is not set.

## Small utilities

```python
from datree.utils import example, is_network_error, validate_stdin_path_argument

is_network_error(Exception("i/o timeout"))   # True
validate_stdin_path_argument(["-"])          # accepted
print(example("""
    datree test k8s-demo.yaml
"""))
```

`validate_stdin_path_argument` raises `ValueError` when no path is given, or
when `-` (standard input) is combined with other paths.

`UpgradeManager.upgrade` downloads and runs an installation script with
`curl` and `bash`; it needs the script's URL, given to the constructor or in
the `DATREE_INSTALL_SCRIPT_URL` environment variable.

## What the package does not do

- It installs no command-line tool; everything here is used from Python.
- It does not read or check policy files, and it knows no built-in rule set:
  a schema for each check has to be supplied by the caller.
- It does not talk to a policy service on its own. `Client` is a general
  HTTP client, and the token client that `LocalConfigClient` calls for a new
  token must be supplied by the caller.
- Schemas that use a `regoDefinition` keyword are not evaluated; the keyword
  is ignored.