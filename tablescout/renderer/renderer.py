"""Writing serialized results to output files."""

import asyncio
import functools
import logging
import os
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from tablescout.exceptions import RenderError
from tablescout.renderer.serializers import SERIALIZERS, tabular_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputDescriptor:
    """One file to write: its extension, the data and how to serialize it."""

    ext: str
    data: Any
    serializer: Callable[[Any], str]


def build_outputs(
    data: Any,
    formats: Sequence[str],
    headers: list[str] | None = None,
) -> list[OutputDescriptor]:
    """
    Build output descriptors for the named formats.

    Args:
        data: Data to serialize
        formats: Format names registered in ``SERIALIZERS``
        headers: Optional column order for tabular formats

    Returns:
        One descriptor per format

    Raises:
        RenderError: If a format name is unknown, or a tabular format is given data
            that is not a collection of records
    """
    outputs = []
    for name in formats:
        output_format = SERIALIZERS.get(name)
        if output_format is None:
            raise RenderError(f"Unknown output format '{name}'")
        if output_format.tabular:
            tabular_rows(data)
        serializer = output_format.serializer
        if output_format.tabular and headers:
            serializer = functools.partial(serializer, headers=headers)
        outputs.append(OutputDescriptor(ext=output_format.ext, data=data, serializer=serializer))
    return outputs


def _write_output(output: OutputDescriptor, path: str) -> str:
    content = output.serializer(output.data)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    logger.info(f"Saved {output.ext} output to {path}")
    return path


async def write_outputs(
    outputs: Sequence[OutputDescriptor],
    file_prefix: str,
    output_dir: str,
) -> list[str]:
    """
    Write one file per descriptor to ``output_dir/file_prefix + ext``.

    Files are written concurrently; they share no state, so no order between
    them is defined.

    Returns:
        Paths of the written files, in descriptor order
    """
    os.makedirs(output_dir, exist_ok=True)
    loop = asyncio.get_running_loop()
    tasks = [
        loop.run_in_executor(None, _write_output, output, os.path.join(output_dir, f"{file_prefix}{output.ext}"))
        for output in outputs
    ]
    return list(await asyncio.gather(*tasks))


def render_files(
    formats_fn: Callable[[Any, list[str] | None], Sequence[OutputDescriptor]],
    file_prefix: str,
    output_dir: str,
) -> Callable[..., Awaitable[list[str]]]:
    """
    Bind a format builder to an output location.

    Args:
        formats_fn: Called with ``(data, headers)``, returns the descriptors
        file_prefix: Prefix of every written file name
        output_dir: Directory receiving the files

    Returns:
        Coroutine function taking ``data`` and optional ``headers``
    """

    async def render(data: Any, headers: list[str] | None = None) -> list[str]:
        return await write_outputs(formats_fn(data, headers), file_prefix, output_dir)

    return render
