"""命令执行命令"""

import sys

import click

from pymssh.core.auth import AuthResolver
from pymssh.core.dispatcher import Dispatcher
from pymssh.core.executor import CommandExecutor
from pymssh.core.models import ResultMap
from pymssh.core.session import SessionFactory
from pymssh.log import setup_logging
from pymssh.settings import LOG_LEVELS, OUTPUT_MODES, Settings, SettingsError, load_settings
from pymssh.ui.formatter import COMMAND, OutputFormatter
from pymssh.ui.status import StatusLine


def common_options(func):
    """exec 与 put 共用的选项"""
    options = [
        click.option("--port", "-P", type=int, help="SSH 端口 (默认 22)"),
        click.option("--user", "-u", help="登录用户名 (默认 $LOGNAME)"),
        click.option("--output", "-o", type=click.Choice(OUTPUT_MODES), help="输出格式"),
        click.option("--template", "-T", help="自定义输出模板 (jinja2)"),
        click.option(
            "--log-level",
            "-l",
            type=click.Choice(LOG_LEVELS, case_sensitive=False),
            help="日志级别",
        ),
        click.option(
            "--config",
            "-c",
            "config_file",
            type=click.Path(dir_okay=False),
            help="配置文件路径",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_settings(config_file, **overrides) -> Settings:
    try:
        settings = load_settings(config_file, **overrides)
    except SettingsError as e:
        raise click.ClickException(str(e))
    setup_logging(settings.log_level.upper())
    return settings


def _session_factory(settings: Settings, status_line: StatusLine) -> SessionFactory:
    """解析认证方式, 在分发之前只执行一次"""
    config = AuthResolver(settings).resolve()
    return SessionFactory(
        config,
        port=settings.port,
        status_callback=status_line,
        known_hosts=settings.known_hosts,
    )


def _dispatcher(status_line: StatusLine) -> Dispatcher:
    return Dispatcher(progress_callback=status_line.progress)


def _echo_results(settings: Settings, template, results: ResultMap, kind: str, target: str = ""):
    formatter = OutputFormatter(settings.output, template)
    text = formatter.format_results(results, kind, target)
    click.echo(text, nl=not text.endswith("\n"))
    if not all(result.ok for result in results.values()):
        sys.exit(1)


@click.command()
@click.argument("command")
@click.argument("hosts", nargs=-1, required=True)
@common_options
def execute_command(command, hosts, port, user, output, template, log_level, config_file):
    """在所有主机上并行执行 COMMAND

    example:
      mssh uptime web1 web2 web3
    """
    settings = _load_settings(
        config_file, port=port, user=user, output=output, log_level=log_level
    )

    status_line = StatusLine()
    executor = CommandExecutor(
        _session_factory(settings, status_line), _dispatcher(status_line)
    )
    results = executor.execute_parallel(hosts, command)
    status_line.clear()

    _echo_results(settings, template, results, COMMAND)
