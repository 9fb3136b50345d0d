"""The ``BuildContext`` extension that ambient call sites import."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from ..config.settings import CheckerConfig
from ..exceptions import SourceWriteError
from ..log_config import verbose_log
from ..utils import atomic_write_text

_AMBIENT_GETTER_RE = re.compile(r"^context\.([A-Za-z_]\w*)$")

EXTENSION_TEMPLATE = """// Generated localization helper extension.

import 'package:flutter/widgets.dart';
import '{localization_import}';

extension LocalizationExtension on BuildContext {{
  AppLocalizations get {getter} => AppLocalizations.of(this)!;

  Locale get locale => Localizations.localeOf(this);
}}
"""


def extension_path(config: CheckerConfig, package_name: str) -> Optional[Path]:
    """Map the ambient import onto ``lib/``; ``None`` when it lives in another package."""

    uri = config.ambient_import.format(package=package_name)
    prefix = f"package:{package_name}/"
    if not uri.startswith(prefix):
        return None
    return config.project_root / "lib" / uri[len(prefix) :]


def render_extension(config: CheckerConfig) -> Optional[str]:
    match = _AMBIENT_GETTER_RE.match(config.ambient_accessor)
    if match is None:
        return None
    return EXTENSION_TEMPLATE.format(
        localization_import=config.localization_import, getter=match.group(1)
    )


def ensure_extension_file(config: CheckerConfig, package_name: str) -> Optional[Path]:
    """Write the extension when it is missing and return its path.

    Nothing is written on a dry run, when the file already exists, or when the
    configured accessor or import cannot be served by a generated extension.
    """

    path = extension_path(config, package_name)
    content = render_extension(config)
    if path is None or content is None or path.exists() or config.dry_run:
        return None
    try:
        atomic_write_text(path, content)
    except OSError as exc:
        raise SourceWriteError(f"Cannot write {path}: {exc}") from exc
    verbose_log("extension_written", {"path": config.relative_path(path)})
    return path


__all__ = ["EXTENSION_TEMPLATE", "ensure_extension_file", "extension_path", "render_extension"]
