from dataclasses import dataclass

import pytest

from datree.printer import (
    EvaluationSummary,
    ExtraMessage,
    FailedRule,
    FailureLocation,
    InvalidK8sInfo,
    InvalidYamlInfo,
    OccurrenceDetails,
    Printer,
    Summary,
    SummaryItem,
    Warning,
    get_file_name_text,
)
from datree.theme import create_default_theme, create_simple_theme

EXTRA_TEXT = "Are you trying to test a raw helm file?\nSee the helm plugin README"


@pytest.fixture(autouse=True)
def _no_color(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")


def _warnings():
    return [
        Warning(
            title=get_file_name_text("~/.datree/k8-demo.yaml"),
            failed_rules=[
                FailedRule(
                    name="Caption",
                    occurrences=1,
                    suggestion="Suggestion",
                    occurrences_details=[
                        OccurrenceDetails(
                            metadata_name="yishay",
                            kind="Pod",
                            failure_locations=[
                                FailureLocation(
                                    schema_path=".spec.template.spec.containers.0.image",
                                    failed_error_line=10,
                                    failed_error_column=20,
                                )
                            ],
                        )
                    ],
                )
            ],
        ),
        Warning(
            title=get_file_name_text(
                "/datree/datree/internal/fixtures/kube/yaml-validation-error.yaml\n"
            ),
            invalid_yaml_info=InvalidYamlInfo(
                validation_errors=[ValueError("yaml validation error")]
            ),
        ),
        Warning(
            title=get_file_name_text(
                "/datree/datree/internal/fixtures/kube/k8s-validation-error.yaml\n"
            ),
            invalid_k8s_info=InvalidK8sInfo(
                validation_errors=[ValueError("K8S validation error")], k8s_version="1.18.0"
            ),
        ),
        Warning(
            title=get_file_name_text("/datree/datree/internal/fixtures/kube/Chart.yaml\n"),
            invalid_k8s_info=InvalidK8sInfo(
                validation_errors=[ValueError("K8S validation error")], k8s_version="1.18.0"
            ),
            extra_messages=[ExtraMessage(text=EXTRA_TEXT, color="cyan")],
        ),
        Warning(
            title=get_file_name_text(
                "/datree/datree/internal/fixtures/kube/skipRule/k8s-demo-skip-two.yaml\n"
            ),
            skipped_rules=[
                FailedRule(
                    name="Ensure workload has valid label values",
                    occurrences=1,
                    occurrences_details=[
                        OccurrenceDetails(
                            metadata_name="rss-site",
                            kind="Deployment",
                            skip_message="skip first k8s-demo rule",
                        )
                    ],
                ),
                FailedRule(
                    name="Ensure each container has a configured liveness probe",
                    occurrences=1,
                    occurrences_details=[
                        OccurrenceDetails(
                            metadata_name="rss-site",
                            kind="Deployment",
                            skip_message="skip second k8s-demo rule",
                        )
                    ],
                ),
            ],
        ),
    ]


def _expected_common(error, suggestion):
    return (
        ">>  File: ~/.datree/k8-demo.yaml\n\n"
        "[V] YAML validation\n"
        "[V] Kubernetes schema validation\n\n"
        "[X] Policy check\n\n"
        f"{error} Caption  [1 occurrence]\n"
        "    - metadata.name: yishay (kind: Pod)\n"
        "      > key: spec.template.spec.containers.0.image (line: 10:20)\n\n"
        f"{suggestion} Suggestion\n\n"
        ">>  File: /datree/datree/internal/fixtures/kube/yaml-validation-error.yaml\n\n\n"
        "[X] YAML validation\n\n"
        f"{error} yaml validation error\n\n"
        "[?] Kubernetes schema validation didn't run for this file\n"
        "[?] Policy check didn't run for this file\n\n"
        ">>  File: /datree/datree/internal/fixtures/kube/k8s-validation-error.yaml\n\n\n"
        "[V] YAML validation\n"
        "[X] Kubernetes schema validation\n\n"
        f"{error} K8S validation error\n\n"
        "[?] Policy check didn't run for this file\n\n"
        ">>  File: /datree/datree/internal/fixtures/kube/Chart.yaml\n\n\n"
        "[V] YAML validation\n"
        "[X] Kubernetes schema validation\n\n"
        f"{error} K8S validation error\n"
        f"{EXTRA_TEXT}\n"
        "[?] Policy check didn't run for this file\n\n"
        ">>  File: /datree/datree/internal/fixtures/kube/skipRule/k8s-demo-skip-two.yaml\n\n\n"
        "[V] YAML validation\n"
        "[V] Kubernetes schema validation\n\n"
        "[X] Policy check\n\n"
    )


def test_get_warnings_text():
    printer = Printer()
    expected = _expected_common("\u274c ", "\U0001f4a1 ") + (
        "SKIPPED\n\n"
        "\u23e9  Ensure workload has valid label values\n"
        "    - metadata.name: rss-site (kind: Deployment)\n"
        "\U0001f4a1  skip first k8s-demo rule\n\n"
        "\u23e9  Ensure each container has a configured liveness probe\n"
        "    - metadata.name: rss-site (kind: Deployment)\n"
        "\U0001f4a1  skip second k8s-demo rule\n\n"
        "\n"
    )
    assert printer.get_warnings_text(_warnings(), False) == expected


def test_get_warnings_text_simple_output():
    printer = Printer()
    printer.set_theme(create_simple_theme())
    expected = _expected_common("[X] ", "[*] ") + "\n"
    assert printer.get_warnings_text(_warnings(), True) == expected


def test_warnings_text_with_k8s_warning_and_messages():
    printer = Printer(create_simple_theme())
    warning = Warning(
        title="T\n",
        invalid_k8s_info=InvalidK8sInfo(validation_warning="schema missing"),
        failed_rules=[
            FailedRule(
                name="Rule",
                occurrences=2,
                suggestion="Fix it",
                pac_identifier="RULE_ID",
                occurrences_details=[
                    OccurrenceDetails(validation_failure_messages=["bad value\n"])
                ],
            )
        ],
    )
    text = printer.get_warnings_text([warning], False)
    assert "\n[?] Kubernetes schema validation\nschema missing\n" in text
    assert "[X]  Rule  [2 occurrences]\n" in text
    assert "    Policy as code identifier: RULE_ID\n" in text
    assert "    - metadata.name: N/A (kind: N/A)\n\nbad value\n\n" in text


def test_get_evaluation_summary_text():
    summary = EvaluationSummary(
        configs_count=6,
        rules_count=21,
        files_count=5,
        passed_yaml_validation_count=4,
        k8s_validation="3/5",
        passed_policy_check_count=2,
    )
    expected = (
        "(Summary)\n\n"
        "- Passing YAML validation: 4/5\n\n"
        "- Passing Kubernetes (1.2.3) schema validation: 3/5\n\n"
        "- Passing policy check: 2/5\n\n"
    )
    assert Printer().get_evaluation_summary_text(summary, "1.2.3") == expected


def test_get_evaluation_summary_text_with_no_connection_warning():
    summary = EvaluationSummary(
        configs_count=6,
        rules_count=21,
        files_count=5,
        passed_yaml_validation_count=4,
        k8s_validation="no internet connection",
        passed_policy_check_count=2,
    )
    expected = (
        "(Summary)\n\n"
        "- Passing YAML validation: 4/5\n\n"
        "- Passing Kubernetes (1.2.3) schema validation: no internet connection\n\n"
        "- Passing policy check: 2/5\n\n"
    )
    assert Printer().get_evaluation_summary_text(summary, "1.2.3") == expected


def _summary():
    return Summary(
        plain_rows=[
            SummaryItem(left_col="Enabled rules in policy", right_col="21", row_index=0),
            SummaryItem(left_col="Configs tested", right_col="6", row_index=1),
            SummaryItem(left_col="Total rules evaluated", right_col="40", row_index=5),
        ],
        skip_row=SummaryItem(left_col="Total rules skipped", right_col="0"),
        error_row=SummaryItem(left_col="Total rules failed", right_col="3"),
        success_row=SummaryItem(left_col="Total rules passed", right_col="37"),
    )


def test_summary_table_simple():
    text = Printer(create_simple_theme()).get_summary_table_text(_summary())
    lines = text.splitlines()
    assert len({len(line) for line in lines}) == 1
    assert lines[0] == lines[-1]
    assert lines[0].startswith("+-") and lines[0].endswith("-+")
    labels = [line.split("|")[1].strip() for line in lines[1:-1]]
    assert labels == [
        "Enabled rules in policy",
        "Configs tested",
        "Total rules skipped",
        "Total rules failed",
        "Total rules passed",
        "Total rules evaluated",
    ]
    assert "\x1b[" not in text


def test_summary_table_default_colours_status_rows():
    text = Printer(create_default_theme()).get_summary_table_text(_summary())
    assert "\x1b[36mTotal rules skipped" in text
    assert "\x1b[91mTotal rules failed" in text
    assert "\x1b[32mTotal rules passed" in text
    assert "\x1b[" not in text.splitlines()[1]


@dataclass
class _Detail:
    instance_location: str
    error: str


def test_print_yaml_schema_results_failure(capsys):
    Printer().print_yaml_schema_results([_Detail("/spec", "bad")], None)
    assert capsys.readouterr().out == (
        "Input does NOT pass validation against schema\n/spec - bad\n"
    )


def test_print_yaml_schema_results_pass(capsys):
    Printer().print_yaml_schema_results([], None)
    assert capsys.readouterr().out == "Input PASSES validation against schema\n"


def test_print_yaml_schema_results_invalid(capsys):
    Printer().print_yaml_schema_results(None, ValueError("broken"))
    assert capsys.readouterr().out == "The File Is Invalid\n"


def test_print_error_and_message(capsys):
    printer = Printer()
    printer.print_error("oops\n", "red")
    printer.print_message("hello\n", "green")
    captured = capsys.readouterr()
    assert captured.err == "oops\n"
    assert captured.out == "hello\n"


def test_print_prompt_message(capsys):
    Printer().print_prompt_message("Continue?")
    assert capsys.readouterr().out == "\n\nContinue? (Y/n)\n"


def test_yaml_validation_errors_text():
    text = Printer(create_simple_theme()).get_yaml_validation_errors_text(["first", "second"])
    assert text == "[X] YAML validation\n\n[X]  first\n[X]  second\n\n"


def test_title_and_summary_helpers():
    printer = Printer()
    assert printer.get_title_text("Title") == "Title"
    assert printer.get_yaml_validation_summary_text(1, 2) == "- Passing YAML validation: 1/2\n\n"
    assert get_file_name_text("a.yaml") == ">>  File: a.yaml\n\n"