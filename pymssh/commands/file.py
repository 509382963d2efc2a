"""文件分发命令"""

import click

from pymssh.commands.execute import (
    _dispatcher,
    _echo_results,
    _load_settings,
    _session_factory,
    common_options,
)
from pymssh.core.errors import SourceReadError
from pymssh.core.transfer import FileUploader, read_source
from pymssh.ui.formatter import UPLOAD
from pymssh.ui.status import StatusLine


@click.command()
@click.argument("source")
@click.argument("target")
@click.argument("hosts", nargs=-1, required=True)
@common_options
def upload_command(source, target, hosts, port, user, output, template, log_level, config_file):
    """把本地文件 SOURCE 上传到所有主机的 TARGET

    example:
      mscp /etc/yum.conf /etc/yum.conf web1 web2
    """
    settings = _load_settings(
        config_file, port=port, user=user, output=output, log_level=log_level
    )

    # 没有文件内容就无法分发, 直接终止
    try:
        content = read_source(source)
    except SourceReadError as e:
        raise click.ClickException(str(e))

    status_line = StatusLine()
    uploader = FileUploader(
        _session_factory(settings, status_line), _dispatcher(status_line)
    )
    results = uploader.upload_parallel(hosts, target, content)
    status_line.clear()

    _echo_results(settings, template, results, UPLOAD, target)
