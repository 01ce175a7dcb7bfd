"""Generation pipeline: API document -> files in the target folder.

Steps: stage the skeleton, register the version in the bootstrap module,
merge every endpoint into its route module, validate, then write.

Endpoints are merged independently and their failures are collected rather
than raised, so one broken route module never hides the state of the
others. What gets written after a failure depends on the write policy:
"all-or-nothing" writes no route module at all, "keep-going" writes every
endpoint that merged cleanly.
"""

import difflib
import logging
from dataclasses import dataclass, field

from route_scaffold.config import GeneratorConfig
from route_scaffold.errors import GeneratorError
from route_scaffold.fileio import read_text, write_text_atomic
from route_scaffold.generator.basedoc import build_base_document
from route_scaffold.generator.bootstrap import patch_bootstrap
from route_scaffold.generator.endpoint import endpoint_file, render_endpoint
from route_scaffold.generator.manifest import update_manifest
from route_scaffold.generator.templates import stage_templates, template_text
from route_scaffold.generator.validator import validate_files
from route_scaffold.parser.base import ApiDoc, Endpoint
from route_scaffold.parser.version import resolve_version_tag

logger = logging.getLogger(__name__)


@dataclass
class GeneratedFile:
    rel: str
    content: str
    previous: str | None = None

    @property
    def changed(self) -> bool:
        return self.content != self.previous

    def diff(self) -> str:
        before = (self.previous or "").splitlines(keepends=True)
        after = self.content.splitlines(keepends=True)
        fromfile = f"a/{self.rel}" if self.previous is not None else "/dev/null"
        return "".join(difflib.unified_diff(before, after, fromfile=fromfile, tofile=f"b/{self.rel}"))


@dataclass
class EndpointResult:
    endpoint: str
    rel: str | None
    file: GeneratedFile | None = None
    error: GeneratorError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class GenerationReport:
    tag: str
    dry_run: bool = False
    staged: list[str] = field(default_factory=list)
    bootstrap: GeneratedFile | None = None
    base_document: GeneratedFile | None = None
    endpoints: list[EndpointResult] = field(default_factory=list)
    written: list[str] = field(default_factory=list)
    manifest_updated: bool = False

    @property
    def failures(self) -> list[EndpointResult]:
        return [r for r in self.endpoints if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failures

    def changed_files(self) -> list[GeneratedFile]:
        files = [self.bootstrap, self.base_document] + [r.file for r in self.endpoints if r.ok]
        return [f for f in files if f is not None and f.changed]


def merge_endpoint_file(config: GeneratorConfig, tag: str, endpoint: Endpoint) -> EndpointResult:
    rel = None
    try:
        rel = endpoint_file(tag, endpoint.path)
        previous = read_text(config.target / rel)
        content = render_endpoint(previous, endpoint, path=rel)
    except GeneratorError as e:
        logger.error("%s: %s", endpoint.path, e)
        return EndpointResult(endpoint.path, rel, error=e)
    return EndpointResult(endpoint.path, rel, file=GeneratedFile(rel, content, previous))


def update_bootstrap(config: GeneratorConfig, tag: str, dry_run: bool = False, staged: list[str] | None = None) -> GeneratedFile | None:
    """Register `tag` in the bootstrap module; None when it is missing or already done.

    A bootstrap module that was only staged by a dry run is read from its
    template, so the diff shows the registration it would receive.
    """
    path = config.bootstrap_path
    text = read_text(path)
    previous = text
    if text is None and config.bootstrap_file in (staged or []):
        text = template_text(config.bootstrap_file, tag)
    if text is None:
        logger.warning("%s not found, api version %s not registered", config.bootstrap_file, tag)
        return None
    patched = patch_bootstrap(text, tag, config.init_hook, config.app_identifier, path=config.bootstrap_file)
    if patched is None:
        return None
    if not dry_run:
        write_text_atomic(path, patched)
    return GeneratedFile(config.bootstrap_file, patched, previous)


def generate(apidoc: ApiDoc, config: GeneratorConfig, dry_run: bool = False) -> GenerationReport:
    """Run the whole pipeline and report what was (or would be) written."""
    tag = resolve_version_tag(apidoc)
    report = GenerationReport(tag=tag, dry_run=dry_run)

    report.staged = stage_templates(config.target, tag, dry_run=dry_run)
    report.bootstrap = update_bootstrap(config, tag, dry_run=dry_run, staged=report.staged)
    if report.bootstrap is not None and not dry_run:
        report.written.append(report.bootstrap.rel)

    rel, content = build_base_document(apidoc, tag, config.target)
    report.base_document = GeneratedFile(rel, content, read_text(config.target / rel))

    report.endpoints = [merge_endpoint_file(config, tag, endpoint) for endpoint in apidoc.endpoints()]

    generated = {r.rel: r.file.content for r in report.endpoints if r.ok}
    generated[rel] = content
    errors = validate_files(generated)
    if rel in errors:
        raise GeneratorError(f"{rel}: {errors[rel]}")
    for result in report.endpoints:
        if result.ok and result.rel in errors:
            logger.error("%s: generated module does not parse: %s", result.endpoint, errors[result.rel])
            result.error = GeneratorError(f"generated module does not parse: {errors[result.rel]}")
            result.file = None

    if dry_run:
        return report
    if report.failures and config.write_policy == "all-or-nothing":
        logger.error("%d endpoint(s) failed, no route module written", len(report.failures))
        return report

    for file in [report.base_document] + [r.file for r in report.endpoints if r.ok]:
        if not file.changed:
            continue
        write_text_atomic(config.target / file.rel, file.content)
        report.written.append(file.rel)
        logger.info("Wrote %s", file.rel)

    report.manifest_updated = update_manifest(config.manifest_path)
    return report
