"""Generator settings shared by the CLI and the pipeline."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel

WritePolicy = Literal["all-or-nothing", "keep-going"]


class GeneratorConfig(BaseModel):
    """Where to generate and how the generated app is wired together."""

    target: Path = Path(".")
    bootstrap_file: str = "src/index.js"
    init_hook: str = "initializeApiVersions"
    app_identifier: str = "app"
    manifest_file: str = "package.json"
    write_policy: WritePolicy = "all-or-nothing"

    @property
    def bootstrap_path(self) -> Path:
        return self.target / self.bootstrap_file

    @property
    def manifest_path(self) -> Path:
        return self.target / self.manifest_file
