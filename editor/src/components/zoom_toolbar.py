"""Zoom and snapping toolbar for the canvas."""

from PyQt5.QtWidgets import QWidget, QHBoxLayout, QToolButton, QComboBox, QCheckBox
from PyQt5.QtCore import pyqtSignal

from constants import ZOOM_MIN, ZOOM_MAX, ZOOM_STEP


class ZoomToolbar(QWidget):
	"""Zoom in/out buttons, zoom level dropdown and snapping toggles"""

	zoom_changed = pyqtSignal(int)  # Emits zoom percentage (25-500)
	snap_toggled = pyqtSignal(bool)
	grid_toggled = pyqtSignal(bool)

	# Standard zoom presets
	ZOOM_PRESETS = [25, 50, 100, 150, 200, 300, 400, 500]

	def __init__(self, parent=None, snap_enabled=True, grid_enabled=False):
		super().__init__(parent)
		self._min_percent = int(ZOOM_MIN * 100)
		self._max_percent = int(ZOOM_MAX * 100)
		self._percent = 100

		layout = QHBoxLayout()
		layout.setContentsMargins(0, 0, 0, 0)
		layout.setSpacing(4)

		self.zoom_out_btn = QToolButton()
		self.zoom_out_btn.setText("−")
		self.zoom_out_btn.setToolTip("Zoom Out (Ctrl+-)")
		self.zoom_out_btn.clicked.connect(self._on_zoom_out)
		layout.addWidget(self.zoom_out_btn)

		self.zoom_combo = QComboBox()
		self.zoom_combo.setEditable(False)
		self.zoom_combo.setMinimumWidth(80)
		for preset in self.ZOOM_PRESETS:
			self.zoom_combo.addItem(f"{preset}%", preset)
		self.zoom_combo.setCurrentIndex(self.ZOOM_PRESETS.index(100))
		self.zoom_combo.currentIndexChanged.connect(self._on_combo_changed)
		layout.addWidget(self.zoom_combo)

		self.zoom_in_btn = QToolButton()
		self.zoom_in_btn.setText("+")
		self.zoom_in_btn.setToolTip("Zoom In (Ctrl++)")
		self.zoom_in_btn.clicked.connect(self._on_zoom_in)
		layout.addWidget(self.zoom_in_btn)

		self.snap_check = QCheckBox("Smart snap")
		self.snap_check.setToolTip("Snap to canvas edges, center and other frames (hold Ctrl to bypass)")
		self.snap_check.setChecked(snap_enabled)
		self.snap_check.toggled.connect(self.snap_toggled)
		layout.addWidget(self.snap_check)

		self.grid_check = QCheckBox("Grid")
		self.grid_check.setToolTip("Snap positions and sizes to the grid")
		self.grid_check.setChecked(grid_enabled)
		self.grid_check.toggled.connect(self.grid_toggled)
		layout.addWidget(self.grid_check)

		layout.addStretch()
		self.setLayout(layout)

	def _on_zoom_in(self):
		"""Next preset, or one zoom step past the last preset"""
		for preset in self.ZOOM_PRESETS:
			if preset > self._percent:
				self.set_zoom_percent(preset)
				return
		self.set_zoom_percent(min(self._max_percent, int(self._percent * ZOOM_STEP)))

	def _on_zoom_out(self):
		"""Previous preset, or one zoom step below the first preset"""
		for preset in reversed(self.ZOOM_PRESETS):
			if preset < self._percent:
				self.set_zoom_percent(preset)
				return
		self.set_zoom_percent(max(self._min_percent, int(self._percent / ZOOM_STEP)))

	def _on_combo_changed(self, index):
		if index >= 0:
			self.set_zoom_percent(self.zoom_combo.itemData(index))

	def set_zoom_percent(self, percent, emit_signal=True):
		"""Set zoom level, optionally without emitting zoom_changed"""
		percent = max(self._min_percent, min(self._max_percent, int(percent)))
		changed = percent != self._percent
		self._percent = percent

		# Block signals to prevent recursive updates
		self.zoom_combo.blockSignals(True)
		for i, preset in enumerate(self.ZOOM_PRESETS):
			if preset >= percent:
				self.zoom_combo.setCurrentIndex(i)
				break
		else:
			self.zoom_combo.setCurrentIndex(len(self.ZOOM_PRESETS) - 1)
		self.zoom_combo.blockSignals(False)

		if emit_signal and changed:
			self.zoom_changed.emit(percent)

	def get_zoom_percent(self):
		"""Get current zoom percentage"""
		return self._percent
