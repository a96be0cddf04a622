"""LSP server for the typethis R type checker."""
from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from pygls.lsp.server import LanguageServer
from lsprotocol import types

from frontend.extract import FunctionRecord, extract_functions
from frontend.pipeline import ParsedCode, parse_code
from frontend.r_parser import ParseError
from analysis.builtins import KNOWN_BUILTINS
from analysis.checker import CheckResult, check_parsed
from analysis.context import CheckOptions
from analysis.diagnostics import Diagnostic as TypethisDiagnostic, error_parse
from runtime.types import TypeDescriptor
from lsp.diagnostics import to_lsp_diagnostic
from lsp.hover import get_hover
from lsp.symbols import get_document_symbols

logger = logging.getLogger(__name__)


@dataclass
class AnalysisCache:
    """Cache for last analysis results per document."""

    context: Mapping[str, TypeDescriptor]
    diagnostics: list[TypethisDiagnostic]
    source_hash: str
    settings_hash: str  # Hash of settings used during analysis
    parsed: Optional[ParsedCode] = None
    functions: Dict[str, FunctionRecord] = field(default_factory=dict)


# Global cache: URI -> AnalysisCache
analysis_cache: Dict[str, AnalysisCache] = {}

# Debouncing: URI -> asyncio.Task
debounce_tasks: Dict[str, asyncio.Task] = {}

# Server settings (updated via workspace/didChangeConfiguration or initializationOptions)
server_settings: Dict[str, object] = {
    "strict": False,
    "analyze_on_change": False,
}

server = LanguageServer(
    "typethis", "v0.1", text_document_sync_kind=types.TextDocumentSyncKind.Full
)


def _compute_hash(source: str) -> str:
    """Compute hash of source text for cache validation."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def _compute_settings_hash() -> str:
    settings_str = f"{server_settings['strict']}"
    return hashlib.sha256(settings_str.encode("utf-8")).hexdigest()


def _publish(ls: LanguageServer, uri: str, diagnostics: list[types.Diagnostic]) -> None:
    ls.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def _apply_settings(settings: Mapping[str, object]) -> None:
    if "strict" in settings:
        server_settings["strict"] = bool(settings["strict"])
    if "analyzeOnChange" in settings:
        server_settings["analyze_on_change"] = bool(settings["analyzeOnChange"])


def analyze_source(source: str, options: CheckOptions) -> tuple[Optional[ParsedCode], CheckResult]:
    """Parse and check one document.

    Parse errors keep their source position here so the editor can place
    them; check_types() reports them at 0:0.
    """
    try:
        parsed = parse_code(source)
    except ParseError as e:
        return None, CheckResult(errors=(error_parse(e.message, e.line, e.col),))
    return parsed, check_parsed(parsed, options)


def _validate(ls: LanguageServer, uri: str, source: str, force: bool = False) -> None:
    """Check R source and publish diagnostics.

    Args:
        ls: Language server instance
        uri: Document URI
        source: Document source text
        force: If True, bypass cache and force re-analysis
    """
    start_time = time.time()
    logger.info("Analyzing %s", uri)

    source_hash = _compute_hash(source)
    settings_hash = _compute_settings_hash()
    source_lines = source.split("\n")

    # Skip re-analysis if source and settings unchanged
    if not force and uri in analysis_cache:
        cached = analysis_cache[uri]
        if cached.source_hash == source_hash and cached.settings_hash == settings_hash:
            _publish(ls, uri, [to_lsp_diagnostic(d, source_lines) for d in cached.diagnostics])
            logger.info("Cache hit for %s (source unchanged)", uri)
            return

    try:
        options = CheckOptions(strict=bool(server_settings["strict"]))
        parsed, result = analyze_source(source, options)
        diagnostics = list(result.all_diagnostics())

        _publish(ls, uri, [to_lsp_diagnostic(d, source_lines) for d in diagnostics])

        functions = {}
        if parsed is not None:
            functions = {f.name: f for f in extract_functions(parsed) if f.name}

        analysis_cache[uri] = AnalysisCache(
            context=result.final_context,
            diagnostics=diagnostics,
            source_hash=source_hash,
            settings_hash=settings_hash,
            parsed=parsed,
            functions=functions,
        )

        elapsed = time.time() - start_time
        logger.info("Analysis complete: %s (%.3fs, %d diagnostics)", uri, elapsed, len(diagnostics))

    except Exception as e:
        # Internal error: checker bug
        error_diagnostic = types.Diagnostic(
            range=types.Range(
                start=types.Position(line=0, character=0),
                end=types.Position(line=0, character=0),
            ),
            severity=types.DiagnosticSeverity.Error,
            source="typethis",
            message=f"Internal error: {str(e)}",
        )
        _publish(ls, uri, [error_diagnostic])
        logger.error("Analysis failed for %s: %s", uri, e, exc_info=True)


@server.feature(types.INITIALIZE)
def initialize(ls: LanguageServer, params: types.InitializeParams):
    """Handle initialize request: apply initialization options."""
    logger.info("Server initialized")
    if params.initialization_options and isinstance(params.initialization_options, dict):
        _apply_settings(params.initialization_options)


@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
async def did_open(ls: LanguageServer, params: types.DidOpenTextDocumentParams):
    """Handle document open: analyze immediately."""
    _validate(ls, params.text_document.uri, params.text_document.text)


@server.feature(types.TEXT_DOCUMENT_DID_SAVE)
async def did_save(ls: LanguageServer, params: types.DidSaveTextDocumentParams):
    """Handle document save: analyze immediately (no debounce)."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    _validate(ls, params.text_document.uri, doc.source)


@server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
async def did_change(ls: LanguageServer, params: types.DidChangeTextDocumentParams):
    """Handle document change: debounce analysis by 500ms (if enabled)."""
    if not server_settings["analyze_on_change"]:
        return

    uri = params.text_document.uri

    if uri in debounce_tasks:
        debounce_tasks[uri].cancel()

    async def debounced_validate():
        await asyncio.sleep(0.5)
        doc = ls.workspace.get_text_document(uri)
        _validate(ls, uri, doc.source)
        debounce_tasks.pop(uri, None)

    debounce_tasks[uri] = asyncio.create_task(debounced_validate())


@server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LanguageServer, params: types.DidCloseTextDocumentParams):
    """Drop cached results and clear diagnostics for a closed document."""
    uri = params.text_document.uri
    analysis_cache.pop(uri, None)
    task = debounce_tasks.pop(uri, None)
    if task is not None:
        task.cancel()
    _publish(ls, uri, [])


@server.feature(types.TEXT_DOCUMENT_HOVER)
def hover(ls: LanguageServer, params: types.HoverParams) -> Optional[types.Hover]:
    """Handle hover request: show the inferred type of the name at the cursor."""
    uri = params.text_document.uri
    if uri not in analysis_cache:
        return None

    doc = ls.workspace.get_text_document(uri)
    cached = analysis_cache[uri]

    return get_hover(
        cached.context,
        doc.source,
        params.position.line,
        params.position.character,
        functions=cached.functions,
        builtins_set=KNOWN_BUILTINS,
    )


@server.feature(types.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(
    ls: LanguageServer, params: types.DocumentSymbolParams
) -> Optional[list[types.DocumentSymbol]]:
    """Handle document symbol request: return function definitions for outline view."""
    uri = params.text_document.uri
    if uri not in analysis_cache or analysis_cache[uri].parsed is None:
        return None

    doc = ls.workspace.get_text_document(uri)
    symbols = get_document_symbols(analysis_cache[uri].parsed, doc.source.split("\n"))
    return symbols or None


@server.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(
    ls: LanguageServer, params: types.DidChangeConfigurationParams
):
    """Handle configuration changes from the client."""
    settings = getattr(params, "settings", None)
    if settings and isinstance(settings, dict):
        section = settings.get("typethis", {})
        if isinstance(section, dict):
            _apply_settings(section)

    # Re-analyze open documents with the new settings
    for uri in list(analysis_cache.keys()):
        doc = ls.workspace.get_text_document(uri)
        _validate(ls, uri, doc.source)
