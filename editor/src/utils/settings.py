"""Editor settings persistence (smart snap and grid options)"""

import os
import json
import logging
from dataclasses import dataclass, field, fields, asdict

from constants import DEFAULT_SNAP_TO_GRID, DEFAULT_SNAP_GRID_SIZE
from models.snapping import SnapOptions
from utils.logger import loggerRaise


CONFIG_DIR = os.path.join(os.path.expanduser('~'), '.frame_editor')
CONFIG_FILE = os.path.join(CONFIG_DIR, 'settings.json')

_logger = logging.getLogger(__name__)


@dataclass
class EditorSettings:
	"""Persisted user preferences"""
	snap: SnapOptions = field(default_factory=SnapOptions)
	snap_to_grid: bool = DEFAULT_SNAP_TO_GRID
	grid_size: float = DEFAULT_SNAP_GRID_SIZE

	def to_dict(self):
		return {
			'snap': asdict(self.snap),
			'snap_to_grid': self.snap_to_grid,
			'grid_size': self.grid_size,
		}

	@classmethod
	def from_dict(cls, data):
		"""Build from parsed JSON. Unknown keys are ignored, missing keys use defaults."""
		defaults = cls()
		snap_data = data.get('snap') or {}
		known = {f.name for f in fields(SnapOptions)}
		snap = SnapOptions(**{k: v for k, v in snap_data.items() if k in known})
		return cls(
			snap=snap,
			snap_to_grid=bool(data.get('snap_to_grid', defaults.snap_to_grid)),
			grid_size=float(data.get('grid_size', defaults.grid_size)),
		)


def load_settings(path=CONFIG_FILE):
	"""Load settings from a JSON file; defaults if the file does not exist"""
	if not os.path.exists(path):
		return EditorSettings()
	try:
		with open(path, 'r', encoding='utf-8') as f:
			data = json.load(f)
		if not isinstance(data, dict):
			raise ValueError(f"Settings file must contain a JSON object: {path}")
		settings = EditorSettings.from_dict(data)
	except (OSError, ValueError, TypeError) as e:
		loggerRaise(e, "Error loading settings")
	_logger.debug(f"Loaded settings from {path}")
	return settings


def save_settings(settings, path=CONFIG_FILE):
	"""Write settings as JSON, creating the config directory if needed"""
	try:
		directory = os.path.dirname(path)
		if directory:
			os.makedirs(directory, exist_ok=True)
		with open(path, 'w', encoding='utf-8') as f:
			json.dump(settings.to_dict(), f, indent=2)
	except OSError as e:
		loggerRaise(e, "Error saving settings")
	_logger.debug(f"Saved settings to {path}")
