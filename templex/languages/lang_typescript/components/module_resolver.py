"""
Module path resolution for import specifiers.

Relative specifiers are resolved against the importing file by trying a fixed
series of extension variants. Non-relative specifiers are resolved through the
project's ``tsconfig.json``/``jsconfig.json`` ``baseUrl`` and ``paths``
settings; bare package imports are never followed.
"""
import json
import logging
import os
import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from templex.core.config import config
from templex.core.error_handling import InvalidConfigurationError, TransientHostError
from templex.core.filesystem import FileSystem
from templex.languages.lang_typescript.config import EXTENSION_SUBSTITUTIONS, SCRIPT_EXTENSION_PATTERN

logger = logging.getLogger(__name__)

_SCRIPT_EXTENSION = re.compile(SCRIPT_EXTENSION_PATTERN)


class ProjectConfig(BaseModel):
    """The path-mapping part of a tsconfig/jsconfig file"""
    root: Path
    base_url: Optional[Path] = None
    paths: Dict[str, List[str]] = Field(default_factory=dict)

    @property
    def paths_base(self) -> Path:
        return self.base_url if self.base_url is not None else self.root


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas outside of strings."""
    result = []
    i, length = 0, len(text)
    in_string = False
    while i < length:
        char = text[i]
        if in_string:
            result.append(char)
            if char == '\\' and i + 1 < length:
                result.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue
        if char == '"':
            in_string = True
            result.append(char)
            i += 1
        elif text.startswith('//', i):
            newline = text.find('\n', i)
            i = length if newline < 0 else newline
        elif text.startswith('/*', i):
            end = text.find('*/', i + 2)
            i = length if end < 0 else end + 2
        else:
            result.append(char)
            i += 1
    return re.sub(r',(\s*[}\]])', r'\1', ''.join(result))


def parse_project_config(text: str, config_path: Path) -> dict:
    """
    Parse tsconfig text into a dict.

    Raises:
        InvalidConfigurationError: If the file is not valid (commented) JSON
    """
    try:
        data = json.loads(strip_json_comments(text))
    except ValueError as e:
        raise InvalidConfigurationError(str(config_path), '<unparseable>', str(e)) from e
    if not isinstance(data, dict):
        raise InvalidConfigurationError(str(config_path), type(data).__name__, 'expected an object')
    return data


class ModulePathResolver:
    """Resolves import specifiers to files on disk."""

    def __init__(self, fs: Optional[FileSystem] = None, project_config: Optional[ProjectConfig] = None):
        """
        Args:
            fs: Filesystem used for existence checks and config reads
            project_config: Path mappings to use instead of discovering a
                tsconfig/jsconfig next to each importing file
        """
        self.fs = fs or FileSystem()
        self.project_config = project_config

    async def resolve(self, specifier: str, importing_path: Union[str, Path]) -> Optional[Path]:
        """
        Return the file ``specifier`` refers to when imported from ``importing_path``.

        Returns None when the import cannot be followed; that is not an error.
        """
        importing_dir = Path(importing_path).parent
        if specifier.startswith('./') or specifier.startswith('../') or specifier in ('.', '..'):
            resolved = await self._resolve_candidates(importing_dir / specifier)
        else:
            resolved = await self._resolve_non_relative(specifier, Path(importing_path))
        if resolved is None:
            logger.debug(f"Could not resolve '{specifier}' from {importing_path}")
        return resolved

    async def _resolve_candidates(self, target: Path) -> Optional[Path]:
        for candidate in self._candidates(target):
            if await self.fs.exists(candidate):
                return Path(os.path.normpath(candidate))
        return None

    @staticmethod
    def _candidates(target: Path) -> List[Path]:
        raw = str(target)
        append_extensions = config.get('modules', 'append_extensions', ['.ts', '.tsx', '.js', '.jsx'])
        if _SCRIPT_EXTENSION.search(raw):
            candidates = []
            for pattern, replacement in EXTENSION_SUBSTITUTIONS:
                if re.search(pattern, raw):
                    candidates.append(Path(re.sub(pattern, replacement, raw)))
            candidates.append(target)
            return candidates
        candidates = [Path(raw + extension) for extension in append_extensions]
        candidates.extend(target / f'index{extension}' for extension in append_extensions)
        return candidates

    async def _resolve_non_relative(self, specifier: str, importing_path: Path) -> Optional[Path]:
        project = self.project_config
        if project is None:
            try:
                project = await self.load_project_config(importing_path.parent)
            except InvalidConfigurationError as e:
                logger.warning(f"Ignoring project configuration: {e}")
                return None
        if project is None:
            return None

        for target in self._mapped_targets(specifier, project):
            resolved = await self._resolve_candidates(project.paths_base / target)
            if resolved is not None:
                return resolved
        if project.base_url is not None:
            return await self._resolve_candidates(project.base_url / specifier)
        return None

    @staticmethod
    def _mapped_targets(specifier: str, project: ProjectConfig) -> List[str]:
        """Substitute ``specifier`` into every matching ``paths`` entry, best match first."""
        exact = project.paths.get(specifier)
        if exact:
            return list(exact)
        matches = []
        for pattern, targets in project.paths.items():
            if pattern.count('*') != 1:
                continue
            prefix, suffix = pattern.split('*')
            if specifier.startswith(prefix) and specifier.endswith(suffix) and \
                    len(specifier) >= len(prefix) + len(suffix):
                captured = specifier[len(prefix):len(specifier) - len(suffix)]
                matches.append((len(prefix), [target.replace('*', captured) for target in targets]))
        matches.sort(key=lambda item: item[0], reverse=True)
        return [target for _, targets in matches for target in targets]

    async def load_project_config(self, start_dir: Path) -> Optional[ProjectConfig]:
        """
        Find the nearest tsconfig.json (else jsconfig.json) above ``start_dir``.

        Returns None if there is none or it cannot be read.
        """
        config_path = await self._find_config_file(start_dir)
        if config_path is None:
            return None
        try:
            data = parse_project_config(await self.fs.read(config_path), config_path)
        except (OSError, TransientHostError) as e:
            logger.debug(f"Cannot read {config_path}: {e}")
            return None
        options = dict(data.get('compilerOptions') or {})

        extends = data.get('extends')
        if isinstance(extends, str) and extends.startswith('.'):
            parent_path = (config_path.parent / extends)
            if parent_path.suffix != '.json':
                parent_path = parent_path.with_name(parent_path.name + '.json')
            try:
                parent = parse_project_config(await self.fs.read(parent_path), parent_path)
            except (OSError, TransientHostError) as e:
                logger.debug(f"Cannot read extended config {parent_path}: {e}")
            else:
                parent_options = dict(parent.get('compilerOptions') or {})
                if 'baseUrl' in parent_options and 'baseUrl' not in options:
                    options['baseUrl'] = str(parent_path.parent / parent_options['baseUrl'])
                options = {**parent_options, **options}

        root = config_path.parent
        base_url = options.get('baseUrl')
        return ProjectConfig(
            root=root,
            base_url=(root / base_url) if isinstance(base_url, str) else None,
            paths={key: list(value) for key, value in (options.get('paths') or {}).items()
                   if isinstance(value, list)},
        )

    async def _find_config_file(self, start_dir: Path) -> Optional[Path]:
        config_files = config.get('modules', 'config_files', ['tsconfig.json', 'jsconfig.json'])
        for file_name in config_files:
            current = start_dir.resolve()
            while True:
                candidate = current / file_name
                if await self.fs.exists(candidate):
                    return candidate
                if current.parent == current:
                    break
                current = current.parent
        return None
