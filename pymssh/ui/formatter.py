"""输出格式化模块"""

import dataclasses
from typing import List, Optional

import marshmallow_dataclass
import yaml
from jinja2 import Template
from rich.console import Console
from rich.table import Table

from pymssh.core.models import HostOutcome, ResultMap, TaskResult

COMMAND = "command"
UPLOAD = "upload"

default_command_template = """
========== {{ host }} ==========
status: {{ status }}
{% if output %}
output:
{{ output }}
{% endif %}
{% if error %}
error: {{ error }}
{% endif %}
"""

default_upload_template = """
========== {{ host }} ==========
dst: {{ target }}
state: {% if status == "success" %}successfully!{% else %}failed!{% endif %}
{% if error %}
error: {{ error }}
{% endif %}
"""

HostOutcomeSchema = marshmallow_dataclass.class_schema(HostOutcome)


class OutputFormatter:
    """输出格式化器"""

    def __init__(self, format_type: str = "plain", template: Optional[str] = None):
        self.format_type = format_type.lower()
        self.template = template

    def format_results(self, results: ResultMap, kind: str = COMMAND, target: str = "") -> str:
        outcomes = [HostOutcome.from_result(r) for r in results.values()]

        if self.format_type == "json":
            return HostOutcomeSchema().dumps(outcomes, many=True, indent=2)
        elif self.format_type == "yaml":
            return yaml.dump(
                [dataclasses.asdict(o) for o in outcomes],
                allow_unicode=True,
                sort_keys=False,
            )
        elif self.format_type == "template":
            return self._format_template(outcomes, kind, target)
        elif self.format_type == "table":
            return self._format_table(outcomes, kind)
        else:
            return self._format_plain(list(results.values()), kind)

    def _format_plain(self, results: List[TaskResult], kind: str) -> str:
        lines = ["\n"]
        for result in results:
            if kind == COMMAND:
                lines.append(f"{result.host}: {result.payload}")
            elif result.ok:
                lines.append(f"{result.host}: ok\n")
            else:
                lines.append(f"{result.host}: {result.error}\n")
        return "".join(lines)

    def _format_template(self, outcomes: List[HostOutcome], kind: str, target: str) -> str:
        source = self.template or (
            default_command_template if kind == COMMAND else default_upload_template
        )
        template = Template(
            source, lstrip_blocks=True, trim_blocks=True, keep_trailing_newline=True
        )
        return "".join(
            template.render({**dataclasses.asdict(o), "target": target}) for o in outcomes
        )

    def _format_table(self, outcomes: List[HostOutcome], kind: str) -> str:
        title = "Command Execution Results" if kind == COMMAND else "Upload Results"
        table = Table(title=title)
        table.add_column("Host", style="cyan")
        table.add_column("Status", style="white")
        if kind == COMMAND:
            table.add_column("Output", style="white")
        table.add_column("Error", style="red")

        for outcome in outcomes:
            status_text = "✅" if outcome.status == "success" else "❌"
            row = [outcome.host, status_text]
            if kind == COMMAND:
                row.append((outcome.output or "").rstrip())
            row.append(outcome.error or "")
            table.add_row(*row)

        console = Console(width=120)
        with console.capture() as capture:
            console.print(table)
        return capture.get()
