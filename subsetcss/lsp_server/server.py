"""
Language server implementation for subsetcss.

pygls-based server that answers textDocument/completion with the values the
project's subset configuration allows for the declaration under the cursor.
"""

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Dict, Optional, Tuple
from urllib.parse import urlparse

from lsprotocol import types as lsp
from pydantic import ValidationError
from pygls.lsp.server import LanguageServer
from pygls.uris import to_fs_path

from config.defaults import SETTINGS_SECTION
from config.loader import SubsetConfigLoader, SubsetConfigStore
from core import __version__
from core.models.config import ServerSettings, SubsetConfig
from core.resolution.pipeline import CompletionResolver, get_line
from core.sync.watcher import ConfigFileWatcher
from subsetcss.logging_setup import setup_logging
from subsetcss.lsp_server.models import DocumentSettings

logger = logging.getLogger(__name__)

SERVER_NAME = "subsetcss-language-server"


def uri_to_path(uri: str) -> Optional[Path]:
    """Filesystem path for a file:// URI; None for other schemes"""
    if urlparse(uri).scheme != "file":
        return None
    fs_path = to_fs_path(uri)
    return Path(fs_path) if fs_path else None


class SubsetLanguageServer(LanguageServer):
    """
    subsetcss language server.

    Holds the workspace root, the client capability flags, cached
    per-document settings and the configuration snapshot store. Handlers
    are registered in ``create_server``.
    """

    def __init__(self, settings: Optional[ServerSettings] = None, *args, **kwargs):
        super().__init__(SERVER_NAME, __version__, *args, **kwargs)
        self.settings = settings or ServerSettings()

        self.workspace_root: Optional[Path] = None
        self.has_configuration_capability = False
        self.has_workspace_folder_capability = False
        self.has_related_information_capability = False

        self.global_settings = DocumentSettings(config_path=self.settings.config_path)
        self.document_settings: Dict[str, DocumentSettings] = {}

        self.loader = SubsetConfigLoader()
        self.store = SubsetConfigStore(self.loader)
        self.resolver = CompletionResolver()
        self.watcher: Optional[ConfigFileWatcher] = None

    # Lifecycle

    def on_initialize(self, params: lsp.InitializeParams) -> None:
        if params.root_uri:
            self.workspace_root = uri_to_path(params.root_uri)
        elif params.root_path:
            self.workspace_root = Path(params.root_path)

        workspace = params.capabilities.workspace
        self.has_configuration_capability = bool(workspace and workspace.configuration)
        self.has_workspace_folder_capability = bool(workspace and workspace.workspace_folders)

        text_document = params.capabilities.text_document
        publish = text_document.publish_diagnostics if text_document else None
        self.has_related_information_capability = bool(publish and publish.related_information)

        logger.info(
            f"Initialized for workspace {self.workspace_root} "
            f"(configuration={self.has_configuration_capability}, "
            f"workspaceFolders={self.has_workspace_folder_capability})"
        )

    async def on_initialized(self) -> None:
        if self.has_configuration_capability:
            try:
                await self.client_register_capability_async(
                    lsp.RegistrationParams(registrations=[
                        lsp.Registration(
                            id=str(uuid.uuid4()),
                            method=lsp.WORKSPACE_DID_CHANGE_CONFIGURATION
                        )
                    ])
                )
            except Exception as e:
                logger.warning(f"Client rejected configuration registration: {e}")

        if self.settings.watch_config:
            self.start_watcher(asyncio.get_running_loop())

    def start_watcher(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        if self.watcher is None:
            self.watcher = ConfigFileWatcher(self.store)
        self.watcher.start(loop)

    def shutdown_watcher(self) -> None:
        if self.watcher is not None:
            self.watcher.stop()

    # Settings

    def config_path_for(self, settings: DocumentSettings) -> Path:
        return self.loader.resolve_path(settings.config_path, self.workspace_root)

    async def get_document_settings(self, uri: str) -> DocumentSettings:
        """Settings for a document, fetched from the client once per uri"""
        if not self.has_configuration_capability:
            return self.global_settings

        cached = self.document_settings.get(uri)
        if cached is not None:
            return cached

        try:
            result = await self.workspace_configuration_async(
                lsp.ConfigurationParams(items=[
                    lsp.ConfigurationItem(scope_uri=uri, section=SETTINGS_SECTION)
                ])
            )
        except Exception as e:
            logger.warning(f"workspace/configuration failed for {uri}: {e}")
            return self.global_settings

        raw = result[0] if result else None
        try:
            settings = DocumentSettings.from_client(raw, fallback=self.global_settings)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid {SETTINGS_SECTION} settings for {uri}: {e}")
            settings = self.global_settings

        self.document_settings[uri] = settings
        return settings

    def on_configuration_changed(self, params: lsp.DidChangeConfigurationParams) -> None:
        if self.has_configuration_capability:
            self.document_settings.clear()
        else:
            raw = params.settings.get(SETTINGS_SECTION) if isinstance(params.settings, dict) else None
            try:
                self.global_settings = DocumentSettings.from_client(
                    raw, fallback=DocumentSettings(config_path=self.settings.config_path)
                )
            except ValidationError as e:
                logger.warning(f"Ignoring invalid {SETTINGS_SECTION} settings: {e}")

        # Configured paths may now point elsewhere
        self.store.clear()
        logger.info("Client configuration changed")

    def on_document_closed(self, params: lsp.DidCloseTextDocumentParams) -> None:
        self.document_settings.pop(params.text_document.uri, None)

    # Files

    def on_watched_files_changed(self, params: lsp.DidChangeWatchedFilesParams) -> None:
        for change in params.changes:
            path = uri_to_path(change.uri)
            if path is None:
                logger.debug(f"Ignoring change for non-file uri {change.uri}")
                continue
            if not self.store.is_tracked(path):
                logger.debug(f"Ignoring change for untracked file {path}")
                continue
            logger.info(f"Config file changed ({change.type}): {path}")
            self.store.reload(path)

    def on_workspace_folders_changed(self, params: lsp.DidChangeWorkspaceFoldersParams) -> None:
        logger.info(
            f"Workspace folders changed: +{len(params.event.added)} "
            f"-{len(params.event.removed)}"
        )

    # Completion

    async def complete(self, params: lsp.CompletionParams) -> lsp.CompletionList:
        uri = params.text_document.uri
        line = params.position.line

        try:
            document = self.workspace.get_text_document(uri)
            text = document.source
        except Exception as e:
            logger.error(f"Cannot read document {uri}: {e}")
            return lsp.CompletionList(is_incomplete=False, items=[])

        if not get_line(text, line):
            return lsp.CompletionList(is_incomplete=False, items=[])

        settings = await self.get_document_settings(uri)
        config: Optional[SubsetConfig] = self.store.get(self.config_path_for(settings))

        items = self.resolver.resolve(text, line, config)
        logger.debug(f"{len(items)} completions for {uri}:{line}")
        return lsp.CompletionList(is_incomplete=False, items=[item.to_lsp() for item in items])


def create_server(settings: Optional[ServerSettings] = None) -> SubsetLanguageServer:
    """Create a server with every handler registered"""
    server = SubsetLanguageServer(settings)

    @server.feature(lsp.INITIALIZE)
    def initialize(params: lsp.InitializeParams) -> None:
        server.on_initialize(params)

    @server.feature(lsp.INITIALIZED)
    async def initialized(params: lsp.InitializedParams) -> None:
        await server.on_initialized()

    @server.feature(lsp.WORKSPACE_DID_CHANGE_CONFIGURATION)
    def did_change_configuration(params: lsp.DidChangeConfigurationParams) -> None:
        server.on_configuration_changed(params)

    @server.feature(lsp.WORKSPACE_DID_CHANGE_WATCHED_FILES)
    def did_change_watched_files(params: lsp.DidChangeWatchedFilesParams) -> None:
        server.on_watched_files_changed(params)

    @server.feature(lsp.WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS)
    def did_change_workspace_folders(params: lsp.DidChangeWorkspaceFoldersParams) -> None:
        server.on_workspace_folders_changed(params)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(params: lsp.DidCloseTextDocumentParams) -> None:
        server.on_document_closed(params)

    @server.feature(lsp.TEXT_DOCUMENT_COMPLETION, lsp.CompletionOptions())
    async def completion(params: lsp.CompletionParams) -> lsp.CompletionList:
        return await server.complete(params)

    return server


def main(tcp: Optional[str] = None, settings: Optional[ServerSettings] = None) -> None:
    """
    Run the language server.

    Args:
        tcp: Optional "HOST:PORT"; stdio when omitted
        settings: Server settings, read from the environment when omitted
    """
    settings = settings or ServerSettings()
    setup_logging(settings.log_level, settings.log_file)

    server = create_server(settings)
    try:
        if tcp:
            host, port = parse_host_port(tcp)
            logger.info(f"Starting {SERVER_NAME} on {host}:{port}")
            server.start_tcp(host, port)
        else:
            logger.info(f"Starting {SERVER_NAME} on stdio")
            server.start_io()
    finally:
        server.shutdown_watcher()


def parse_host_port(value: str) -> Tuple[str, int]:
    """Split "HOST:PORT" into (host, int port)"""
    host, sep, port = value.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"Expected HOST:PORT, got {value!r}")
    return host, int(port)
