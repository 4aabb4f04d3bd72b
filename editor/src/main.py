import sys
import os
import logging

# Add editor/src to path so imports work when running directly
if __name__ == "__main__":
    current_dir = os.path.dirname(os.path.abspath(__file__))
    if current_dir not in sys.path:
        sys.path.insert(0, current_dir)

from PyQt5 import QtWidgets
from PyQt5.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QStatusBar, QLabel
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPalette, QColor

from components.canvas_widget import CanvasWidget
from components.zoom_toolbar import ZoomToolbar
from models.frame import Frame
from models.scene import Scene, ELEMENT_TEXT, ELEMENT_BUTTON, ELEMENT_IMAGE
from utils.logger import configure_logging, set_main_window
from utils.settings import load_settings, save_settings

# Configure logging
configure_logging(logging.WARNING)


def build_demo_scene():
    """A few frames to play with"""
    scene = Scene()
    scene.add_element('title', Frame(140, 80, 800, 120), ELEMENT_TEXT, font_size=48)
    scene.add_element('hero', Frame(140, 260, 520, 420), ELEMENT_IMAGE)
    scene.add_element('caption', Frame(700, 260, 240, 200), ELEMENT_TEXT)
    scene.add_element('cta', Frame(700, 560, 240, 80), ELEMENT_BUTTON, font_size=20)
    scene.add_element('footer', Frame(140, 760, 800, 160))
    return scene


class FrameEditorWindow(QMainWindow):
    def __init__(self, scene=None):
        super().__init__()
        self.setWindowTitle("Frame Transform Editor")
        self.resize(1280, 900)

        self.settings = load_settings()
        self.scene = scene or build_demo_scene()

        # Initialize global logger with main window reference
        set_main_window(self)

        self.setup_ui()

    def setup_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(4, 4, 4, 4)

        self.zoom_toolbar = ZoomToolbar(
            snap_enabled=self.settings.snap.enabled,
            grid_enabled=self.settings.snap_to_grid,
        )
        layout.addWidget(self.zoom_toolbar)

        self.canvas_widget = CanvasWidget(
            self.scene,
            snap_options=self.settings.snap,
            snap_to_grid=self.settings.snap_to_grid,
            grid_size=self.settings.grid_size,
        )
        self.canvas_widget.set_show_grid(self.settings.snap_to_grid)
        layout.addWidget(self.canvas_widget, 1)

        # Zoom sync both ways; neither side emits when the value is unchanged
        self.zoom_toolbar.zoom_changed.connect(self.canvas_widget.set_zoom_level)
        self.canvas_widget.zoomChanged.connect(
            lambda percent: self.zoom_toolbar.set_zoom_percent(percent, emit_signal=False)
        )
        self.zoom_toolbar.snap_toggled.connect(self._on_snap_toggled)
        self.zoom_toolbar.grid_toggled.connect(self._on_grid_toggled)

        self.status_label = QLabel("Ready")
        status_bar = QStatusBar()
        status_bar.addWidget(self.status_label)
        self.setStatusBar(status_bar)

        controller = self.canvas_widget.controller
        controller.dragStateChanged.connect(self._on_drag_state_changed)
        controller.hoverChanged.connect(self._on_hover_changed)

    def _on_snap_toggled(self, enabled):
        self.settings.snap.enabled = enabled
        self.canvas_widget.controller.snap_options.enabled = enabled

    def _on_grid_toggled(self, enabled):
        self.settings.snap_to_grid = enabled
        self.canvas_widget.set_snap_to_grid(enabled)

    def _on_drag_state_changed(self, state):
        self.status_label.setText("Ready" if state == 'idle' else f"Dragging: {state}")

    def _on_hover_changed(self, handle):
        if not self.canvas_widget.controller.is_dragging:
            self.status_label.setText(f"Handle: {handle}" if handle else "Ready")

    def closeEvent(self, event):
        self.canvas_widget.controller.teardown()
        save_settings(self.settings)
        super().closeEvent(event)


def main():
    """Main entry point for the Frame Transform Editor"""
    app = QtWidgets.QApplication([])

    # Use Fusion style with dark palette
    app.setStyle("Fusion")

    dark_palette = QPalette()
    dark_palette.setColor(QPalette.Window, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.WindowText, Qt.white)
    dark_palette.setColor(QPalette.Base, QColor(25, 25, 25))
    dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ButtonText, Qt.white)
    dark_palette.setColor(QPalette.Text, Qt.white)
    dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
    dark_palette.setColor(QPalette.HighlightedText, Qt.black)
    app.setPalette(dark_palette)

    window = FrameEditorWindow()
    window.show()
    app.exec_()


if __name__ == "__main__":
    main()
