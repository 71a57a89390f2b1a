"""Main application window (host screen).

Owns the host side of the picker contract: the selected date and whether it
came from deliberate navigation. Navigation ("Go to" a specific day) suppresses
auto-return; going home or browsing the strip re-enables it.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from PySide6.QtCore import QDate, Qt
from PySide6.QtGui import QAction, QGuiApplication, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QDateEdit,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from ..config import PickerConfig, screen_index
from ..utils.datefmt import format_iso_day, same_day
from .components.picker_panel import DatePickerPanel

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(
        self,
        *,
        config: Optional[PickerConfig] = None,
        today: Optional[Callable[[], date]] = None,
        scheduler=None,
    ):
        super().__init__()
        self.setWindowTitle("Daystrip")
        self.setGeometry(100, 100, 480, 220)
        self._navigated = False
        self._createMenuBar()
        self._createLayout(config, today, scheduler)

    def centerOnPreferredScreen(self):
        """Center the window on DAYSTRIP_SCREEN_INDEX if valid, else the primary screen."""
        screens = QGuiApplication.screens()
        if not screens:
            return
        screen = None
        idx = screen_index()
        if idx is not None and 0 <= idx < len(screens):
            screen = screens[idx]
        if screen is None:
            screen = QGuiApplication.primaryScreen() or screens[0]
        geo = screen.availableGeometry()
        win_geo = self.frameGeometry()
        win_geo.moveCenter(geo.center())
        self.move(win_geo.topLeft())

    def _createMenuBar(self):
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("File")
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)
        about_menu = menu_bar.addMenu("About")
        about_action = QAction("About Daystrip", self)
        about_action.triggered.connect(self._showAboutDialog)
        about_menu.addAction(about_action)

    def _showAboutDialog(self):
        QMessageBox.about(
            self,
            "About Daystrip",
            "Daystrip\nPick a day; the strip drifts back to today when left alone.",
        )

    def _createLayout(self, config, today, scheduler):
        central_widget = QWidget()
        root_layout = QVBoxLayout()

        self.picker = DatePickerPanel(
            self, config=config, today=today, scheduler=scheduler
        )
        self.controller = self.picker.controller
        root_layout.addWidget(self.picker)

        # Header row: title, home, navigation
        header = QHBoxLayout()
        self.title_label = QLabel("Daystrip")
        self.title_label.setStyleSheet("font-size:16px;font-weight:600;")
        header.addWidget(self.title_label)
        header.addStretch(1)
        self.home_btn = QPushButton("Today")
        self.home_btn.clicked.connect(self.goToday)
        header.addWidget(self.home_btn)
        self.date_edit = QDateEdit()
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDisplayFormat("yyyy-MM-dd")
        anchor = self.controller.anchor
        self.date_edit.setDate(QDate(anchor.year, anchor.month, anchor.day))
        header.addWidget(self.date_edit)
        self.go_btn = QPushButton("Go")
        self.go_btn.clicked.connect(self._onGoClicked)
        header.addWidget(self.go_btn)
        root_layout.addLayout(header)

        self.selection_label = QLabel("")
        self.selection_label.setAlignment(Qt.AlignCenter)
        root_layout.addWidget(self.selection_label, stretch=1)

        central_widget.setLayout(root_layout)
        self.setCentralWidget(central_widget)
        self.setStatusBar(QStatusBar())

        self.picker.dateSelected.connect(self._onDateSelected)
        QShortcut(QKeySequence("Home"), self, activated=self.goToday)
        self._refreshSelectionLabel()

    # --- Host actions ---
    def goToday(self):
        """Home action: select today and allow auto-return again."""
        self._navigated = False
        self.picker.setSelectedDate(self.controller.anchor, suppress_auto_return=False)
        self._refreshSelectionLabel()

    def navigateTo(self, day: date):
        """Deliberate navigation to ``day``; the picker stays there."""
        self._navigated = True
        self.picker.setSelectedDate(day, suppress_auto_return=True)
        self._refreshSelectionLabel()

    def isNavigated(self) -> bool:
        return self._navigated

    def _onGoClicked(self):
        qd = self.date_edit.date()
        self.navigateTo(date(qd.year(), qd.month(), qd.day()))

    def _onDateSelected(self, day: date):
        # Tap or auto-return: the user is browsing, not navigating.
        if self._navigated:
            self._navigated = False
            self.picker.setSuppressAutoReturn(False)
        self._refreshSelectionLabel()

    def _refreshSelectionLabel(self):
        day = self.controller.selected_date
        text = format_iso_day(day)
        if same_day(day, self.controller.anchor):
            text += " (today)"
        self.selection_label.setText(text)
        mode = "navigated" if self._navigated else "browsing"
        self.statusBar().showMessage(f"Selected: {format_iso_day(day)} [{mode}]")
        logger.debug("host selection %s (%s)", day, mode)

    def closeEvent(self, event):  # type: ignore[override]
        self.picker.dispose()
        super().closeEvent(event)


__all__ = ["MainWindow"]
