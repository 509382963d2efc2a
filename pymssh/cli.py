"""主命令行接口"""

import os
import sys

import click

from pymssh import __version__
from pymssh.commands.execute import execute_command
from pymssh.commands.file import upload_command
from pymssh.commands.version import version_command


@click.group()
@click.version_option(version=__version__)
def cli():
    """pymssh - run one command or upload one file on many hosts over SSH"""


# 注册子命令
cli.add_command(execute_command, name="exec")
cli.add_command(upload_command, name="put")
cli.add_command(version_command, name="version")


def main(argv=None):
    """同一个入口以 mssh 或 mscp 的名字安装, 按程序名选择行为"""
    prog_name = os.path.basename(sys.argv[0])
    command = upload_command if prog_name.startswith("mscp") else execute_command
    command.main(args=argv, prog_name=prog_name)


if __name__ == "__main__":
    main()
