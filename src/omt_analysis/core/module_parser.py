import re

from omt_analysis.core.ports.filesystem import FileSystemPort
from omt_analysis.models import CheckFileResult

# one name, then a single optional trailing blank or a comment
_MODULE_NAME = re.compile(r"^moduleName: (\w+)(?:[ \t]?| [ \t]*#[^\r\n]*)\r?$", re.MULTILINE)


def parse_module_name(text: str) -> str | None:
    match = _MODULE_NAME.search(text)
    return match.group(1) if match else None


def check_text(path: str, text: str) -> CheckFileResult:
    return CheckFileResult(path=path, module_name=parse_module_name(text))


async def check_file(fs: FileSystemPort, path: str) -> CheckFileResult:
    """Read ``path`` and report the module it declares.

    Read errors propagate to the caller.
    """
    return check_text(path, await fs.read_text(path))
