"""Resolution of stored material locations into download targets."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from peerconnect.domain.errors import NotFoundError

_EXTERNAL_URL = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(frozen=True)
class DownloadTarget:
	redirect_url: Optional[str] = None
	path: Optional[Path] = None

	@property
	def is_redirect(self) -> bool:
		return self.redirect_url is not None


class MaterialStorage:
	"""Maps ``file_url`` values onto either an external redirect or a local file."""

	def __init__(self, root: str | Path) -> None:
		self.root = Path(root).resolve()

	def resolve(self, file_url: str) -> DownloadTarget:
		if _EXTERNAL_URL.match(file_url):
			return DownloadTarget(redirect_url=file_url)
		relative = file_url.lstrip("/")
		if relative.startswith("uploads/"):
			relative = relative[len("uploads/"):]
		candidate = (self.root / relative).resolve()
		if self.root not in candidate.parents or not candidate.is_file():
			raise NotFoundError("File not found on server")
		return DownloadTarget(path=candidate)
