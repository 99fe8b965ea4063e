#######################################################################
# External renderer invocation
#######################################################################

from __future__ import annotations

import abc
import asyncio
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidInvocationError, RenderError

logger = logging.getLogger(__name__)


DEFAULT_TMP_NAME = "scad-parser_tmp.scad"


@dataclass
class RenderOptions:
    """Options passed to the OpenSCAD binary.

    Attributes:
        binary_path: Path of the openscad executable.
        output_file: Image or model file to write.
        view_all: Adjust the camera to show the whole model.
        auto_center: Center the model in the view.
        color_scheme: Name of an OpenSCAD color scheme.
    """
    binary_path: str = "/usr/bin/openscad"
    output_file: str = "output.png"
    view_all: bool = True
    auto_center: bool = True
    color_scheme: str = "Cornfield"


class Renderer(abc.ABC):
    """Renders SCAD code or files. Parsing never invokes a renderer."""

    @abc.abstractmethod
    async def render(self, code: Optional[str] = None, file: Optional[str] = None,
                     options: Optional[RenderOptions] = None) -> str:
        """Render `code`, or `file` if no code is given, and return the output path."""


class OpenSCADRenderer(Renderer):
    """Runs the openscad command line tool as a subprocess.

    Example:
        renderer = OpenSCADRenderer()
        output = asyncio.run(renderer.render(file="model.scad"))
    """

    def build_command(self, input_file: str, options: RenderOptions) -> list[str]:
        command = [
            options.binary_path,
            "-o", options.output_file,
            f"--colorscheme={options.color_scheme}",
        ]
        if options.view_all:
            command.append("--viewall")
        if options.auto_center:
            command.append("--autocenter")
        command.append(input_file)
        return command

    async def render(self, code=None, file=None, options=None):
        if options is None:
            options = RenderOptions()
        if not code and not file:
            raise InvalidInvocationError("You have to pass either code or file parameter!")

        if not code:
            return await self._run(file, options)
        # Inline code lives in a private directory that is removed afterwards.
        with tempfile.TemporaryDirectory(prefix="scad-parser_") as tmpdir:
            name = os.path.basename(file) if file else DEFAULT_TMP_NAME
            input_file = os.path.join(tmpdir, name or DEFAULT_TMP_NAME)
            with open(input_file, 'w', encoding='utf-8') as f:
                f.write(code)
            return await self._run(input_file, options)

    async def _run(self, input_file: str, options: RenderOptions) -> str:
        command = self.build_command(input_file, options)
        logger.info("Rendering: %s", " ".join(command))
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await process.communicate()
        if process.returncode != 0:
            message = stderr.decode('utf-8', errors='replace')
            raise RenderError(
                f"Rendering {input_file} failed with exit code {process.returncode}",
                process.returncode,
                message,
            )
        return options.output_file


# vim: set ts=4 sw=4 expandtab:
