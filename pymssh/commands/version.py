import ssl
import sys

import click
import paramiko
from rich import box
from rich.console import Console
from rich.table import Table

from pymssh import __version__


def version_info():
    return [
        ("Program", "pymssh"),
        ("Version", __version__),
        ("Python", " ".join(sys.version.split("\n"))),
        ("Platform", sys.platform),
        ("paramiko", paramiko.__version__),
        ("OpenSSL", ssl.OPENSSL_VERSION),
    ]


def print_version():
    click.echo("\n".join(f"{key}: {value}" for key, value in version_info()))


def print_version_by_rich():
    """
    使用 Rich 库输出版本信息
    """
    table = Table(show_header=False, box=box.ROUNDED, padding=(0, 1))
    table.add_column("Key", style="cyan bold", width=20)
    table.add_column("Value", style="white")
    for key, value in version_info():
        table.add_row(key, value)
    Console().print(table)


@click.command()
@click.option("--simple", "-s", is_flag=True, default=False, help="简化版输出")
def version_command(simple):
    """
    打印版本信息
    """
    if simple:
        print_version()
    else:
        print_version_by_rich()
