"""Render evaluation results as text for the terminal."""

from __future__ import annotations

import re
import sys
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence, TextIO

from .theme import FG_HI_CYAN, Style, Theme, create_default_theme

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


@dataclass
class FailureLocation:
    schema_path: str = ""
    failed_error_line: int = 0
    failed_error_column: int = 0


@dataclass
class OccurrenceDetails:
    metadata_name: str = ""
    kind: str = ""
    skip_message: str = ""
    failure_locations: list[FailureLocation] = field(default_factory=list)
    validation_failure_messages: list[str] = field(default_factory=list)


@dataclass
class FailedRule:
    name: str = ""
    occurrences: int = 0
    suggestion: str = ""
    documentation_url: str = ""
    pac_identifier: str = ""
    occurrences_details: list[OccurrenceDetails] = field(default_factory=list)


@dataclass
class InvalidYamlInfo:
    validation_errors: list[Any] = field(default_factory=list)


@dataclass
class InvalidK8sInfo:
    validation_errors: list[Any] = field(default_factory=list)
    validation_warning: str = ""
    k8s_version: str = ""


@dataclass
class ExtraMessage:
    text: str = ""
    color: str = ""


@dataclass
class Warning:
    """Everything to report about one file."""

    title: str = ""
    failed_rules: list[FailedRule] = field(default_factory=list)
    skipped_rules: list[FailedRule] = field(default_factory=list)
    invalid_yaml_info: InvalidYamlInfo = field(default_factory=InvalidYamlInfo)
    invalid_k8s_info: InvalidK8sInfo = field(default_factory=InvalidK8sInfo)
    extra_messages: list[ExtraMessage] = field(default_factory=list)


@dataclass
class SummaryItem:
    right_col: str = ""
    left_col: str = ""
    row_index: int = 0


@dataclass
class Summary:
    plain_rows: list[SummaryItem] = field(default_factory=list)
    skip_row: SummaryItem = field(default_factory=SummaryItem)
    error_row: SummaryItem = field(default_factory=SummaryItem)
    success_row: SummaryItem = field(default_factory=SummaryItem)


@dataclass
class EvaluationSummary:
    configs_count: int = 0
    rules_count: int = 0
    files_count: int = 0
    passed_yaml_validation_count: int = 0
    k8s_validation: str = ""
    passed_policy_check_count: int = 0


def get_file_name_text(title: str) -> str:
    return f">>  File: {title}\n\n"


def _display_width(text: str) -> int:
    width = 0
    for char in _ANSI.sub("", text):
        if unicodedata.combining(char):
            continue
        width += 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    return width


def _render_table(rows: Sequence[tuple[Sequence[str], int | None]]) -> str:
    """Draw bordered, left-aligned rows; a row may carry one colour code."""
    split_rows = [([cell.split("\n") for cell in cells], code) for cells, code in rows]
    column_count = max((len(cells) for cells, _ in split_rows), default=0)
    widths = [0] * column_count
    for cells, _ in split_rows:
        for column, lines in enumerate(cells):
            widths[column] = max(widths[column], *(_display_width(line) for line in lines))

    border = "+" + "+".join("-" * (width + 2) for width in widths) + "+\n"
    out = [border]
    for cells, code in split_rows:
        height = max(len(lines) for lines in cells)
        for line_number in range(height):
            parts = []
            for column, width in enumerate(widths):
                lines = cells[column] if column < len(cells) else []
                text = lines[line_number] if line_number < len(lines) else ""
                padded = text + " " * (width - _display_width(text))
                if code is not None:
                    padded = f"\x1b[{code}m{padded}\x1b[0m"
                parts.append(f" {padded} ")
            out.append("|" + "|".join(parts) + "|\n")
    out.append(border)
    return "".join(out)


class Printer:
    """Formats and prints results using a theme."""

    def __init__(
        self,
        theme: Theme | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.theme = theme or create_default_theme()
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    def set_theme(self, theme: Theme) -> None:
        self.theme = theme

    def get_text_in_color(self, text: str, color: Style) -> str:
        return color.sprint(text)

    def get_title_text(self, title: str) -> str:
        return self.get_text_in_color(title, self.theme.yellow)

    def _error_lines(self, errors: Iterable[Any]) -> str:
        return "".join(
            f"{self.theme.error_emoji} {self.theme.red_bold.sprint(str(error))}\n"
            for error in errors
        )

    def get_yaml_validation_errors_text(self, yaml_validation_errors: Iterable[Any]) -> str:
        return (
            self.get_text_in_color("[X] YAML validation\n\n", self.theme.highlight)
            + self._error_lines(yaml_validation_errors)
            + "\n"
        )

    def _passed_yaml_validation_text(self) -> str:
        return self.get_text_in_color("[V] YAML validation\n", self.theme.green)

    def _skipped_policy_check_text(self) -> str:
        return self.get_text_in_color(
            "[?] Policy check didn't run for this file\n", self.theme.highlight
        )

    def _yaml_validation_warning_text(self, warning: Warning) -> str:
        return (
            self.get_yaml_validation_errors_text(warning.invalid_yaml_info.validation_errors)
            + self.get_text_in_color(
                "[?] Kubernetes schema validation didn't run for this file\n",
                self.theme.highlight,
            )
            + self._skipped_policy_check_text()
            + "\n"
        )

    def _k8s_validation_error_text(self, warning: Warning) -> str:
        parts = [
            self._passed_yaml_validation_text(),
            self.get_text_in_color("[X] Kubernetes schema validation\n\n", self.theme.highlight),
            self._error_lines(warning.invalid_k8s_info.validation_errors),
        ]
        parts.extend(
            self.get_text_in_color(message.text, self._style_for(message.color))
            for message in warning.extra_messages
        )
        parts += ["\n", self._skipped_policy_check_text(), "\n"]
        return "".join(parts)

    @staticmethod
    def _k8s_validation_warning_text(warning: Warning) -> str:
        return (
            "\n[?] Kubernetes schema validation\n"
            + warning.invalid_k8s_info.validation_warning
            + "\n"
        )

    @staticmethod
    def _or_not_available(text: str) -> str:
        return text or "N/A"

    def _occurrence_header(self, details: OccurrenceDetails) -> str:
        return (
            f"    - metadata.name: {self._or_not_available(details.metadata_name)}"
            f" (kind: {self._or_not_available(details.kind)})\n"
        )

    def _rule_links(self, rule: FailedRule) -> str:
        parts = []
        if rule.pac_identifier:
            parts.append(
                f"    Policy as code identifier: {self.theme.cyan.sprint(rule.pac_identifier)}\n"
            )
        if rule.documentation_url:
            parts.append(f"    How to fix: {self.theme.cyan.sprint(rule.documentation_url)}\n")
        return "".join(parts)

    def _skipped_rules_text(self, rules: Sequence[FailedRule]) -> str:
        if not rules:
            return ""
        parts = [self.theme.cyan_bold.sprint("SKIPPED") + "\n\n"]
        for rule in rules:
            parts.append(f"{self.theme.skip_emoji} {self.theme.cyan_bold.sprint(rule.name)}\n")
            parts.append(self._rule_links(rule))
            for details in rule.occurrences_details:
                parts.append(self._occurrence_header(details))
                message = self.theme.highlight.sprint(details.skip_message)
                parts.append(f"{self.theme.suggestion_emoji} {message}\n")
            parts.append("\n")
        return "".join(parts)

    def _failed_rule_text(self, rule: FailedRule) -> str:
        postfix = "s" if rule.occurrences > 1 else ""
        occurrences = self.theme.highlight.sprint(f" [{rule.occurrences} occurrence{postfix}]")
        parts = [
            f"{self.theme.error_emoji} {self.theme.red_bold.sprint(rule.name)} {occurrences}\n",
            self._rule_links(rule),
        ]
        for details in rule.occurrences_details:
            parts.append(self._occurrence_header(details))
            for location in details.failure_locations:
                if location.schema_path:
                    key = location.schema_path.replace("/", ".")[1:]
                    parts.append(
                        f"      > key: {key} (line: {location.failed_error_line}:"
                        f"{location.failed_error_column})\n"
                    )
            parts.append("\n")
            if details.validation_failure_messages:
                parts.extend(details.validation_failure_messages)
                parts.append("\n")
        parts.append(f"{self.theme.suggestion_emoji} {rule.suggestion}\n")
        parts.append("\n")
        return "".join(parts)

    def get_warnings_text(self, warnings: Iterable[Warning], quiet: bool) -> str:
        """Describe each file's validation and policy results."""
        parts: list[str] = []
        for warning in warnings:
            parts.append(self.get_title_text(warning.title))
            if warning.invalid_yaml_info.validation_errors:
                parts.append(self._yaml_validation_warning_text(warning))
                continue
            if warning.invalid_k8s_info.validation_errors:
                parts.append(self._k8s_validation_error_text(warning))
                continue
            parts.append(self._passed_yaml_validation_text())
            if warning.invalid_k8s_info.validation_warning:
                parts.append(self._k8s_validation_warning_text(warning))
            else:
                parts.append(
                    self.get_text_in_color("[V] Kubernetes schema validation\n", self.theme.green)
                )
            parts.append("\n")
            parts.append(self.get_text_in_color("[X] Policy check\n", self.theme.highlight))
            parts.append("\n")
            if not quiet:
                parts.append(self._skipped_rules_text(warning.skipped_rules))
            parts.extend(self._failed_rule_text(rule) for rule in warning.failed_rules)
        parts.append("\n")
        return "".join(parts)

    def _yaml_schema_results_text(self, errors_result: Sequence[Any] | None, error: Any) -> str:
        if errors_result:
            details = "".join(f"{item.instance_location} - {item.error}\n" for item in errors_result)
            return self.get_text_in_color(
                "Input does NOT pass validation against schema\n", self.theme.red_bold
            ) + self.get_text_in_color(details, self.theme.red_bold)
        if error is None:
            return self.get_text_in_color(
                "Input PASSES validation against schema\n", self.theme.green
            )
        return self.get_text_in_color("The File Is Invalid\n", self.theme.red_bold)

    def print_yaml_schema_results(self, errors_result: Sequence[Any] | None, error: Any) -> None:
        """Print whether the input passed schema validation, listing failures."""
        self.out.write(self._yaml_schema_results_text(errors_result, error))

    def get_evaluation_summary_text(self, summary: EvaluationSummary, k8s_version: str) -> str:
        return (
            self.get_text_in_color("(Summary)\n\n", self.theme.highlight)
            + self.get_yaml_validation_summary_text(
                summary.passed_yaml_validation_count, summary.files_count
            )
            + f"- Passing Kubernetes ({k8s_version}) schema validation: {summary.k8s_validation}\n\n"
            + f"- Passing policy check: {summary.passed_policy_check_count}/{summary.files_count}\n\n"
        )

    def get_yaml_validation_summary_text(self, passed_files: int, all_files: int) -> str:
        return f"- Passing YAML validation: {passed_files}/{all_files}\n\n"

    def get_summary_table_text(self, summary: Summary) -> str:
        """Draw the summary table with the skip, error and success rows coloured."""
        rows: list[tuple[list[str], int | None]] = []
        plain = summary.plain_rows
        leading = 0
        for position, item in enumerate(plain):
            if item.row_index == position:
                rows.append(([item.left_col, item.right_col], None))
                leading += 1

        simple = self.theme.name == "Simple"
        for item, code in (
            (summary.skip_row, self.theme.cyan_attribute),
            (summary.error_row, self.theme.red_attribute),
            (summary.success_row, self.theme.green_attribute),
        ):
            rows.append(([item.left_col, item.right_col], None if simple else code))

        row_count = leading + 3
        for item in plain[leading:]:
            if item.row_index < row_count:
                break
            rows.append(([item.left_col, item.right_col], None))
            row_count += 1
        return _render_table(rows)

    def _style_for(self, color: str) -> Style:
        return {
            "error": self.theme.error,
            "red": self.theme.red_bold,
            "yellow": self.theme.yellow,
            "green": self.theme.green,
            "cyan": self.theme.cyan,
        }.get(color, self.theme.highlight)

    def print_error(self, message_text: str, message_color: str) -> None:
        self.err.write(self._style_for(message_color).sprint(message_text))

    def print_message(self, message_text: str, message_color: str) -> None:
        self.out.write(self._style_for(message_color).sprint(message_text))

    def print_prompt_message(self, prompt_message: str) -> None:
        self.out.write(Style((FG_HI_CYAN,)).sprint(f"\n\n{prompt_message} (Y/n)\n"))