"""
Homography Playground viewer (PyQt5)

a row of transform slots along the top; each slot has
  - a combo box to pick the kind: I / Rot / Scale / Trans
  - the editors for that kind's parameters
  - an on/off check box
below them the net homography H (product of the enabled slots, first slot
applied first) and the source image warped by H.

the image is re-warped on every timer tick, edited or not.

usage:
    python -m homography_playground [image_path]
"""

import logging
import sys

import numpy as np
from PyQt5.QtWidgets import (QApplication, QMainWindow, QWidget, QVBoxLayout,
                             QHBoxLayout, QLabel, QComboBox, QDoubleSpinBox,
                             QCheckBox, QStackedWidget, QGridLayout, QPushButton,
                             QScrollArea, QSlider)
from PyQt5.QtCore import Qt, QTimer, pyqtSignal
from PyQt5.QtGui import QPixmap, QFont

from .chain import ChainController
from .config import (ANGLE_RANGE, DEFAULT_IMAGE_PATH, SCALE_RANGE, TRANSLATE_RANGE,
                     WINDOW_TITLE, setup_logging)
from .descriptor import DEFAULT_PARAMS, TransformKind
from .errors import SingularTransformError
from .projection import format_matrix, invert
from .raster import Raster, load_or_generate
from .warp import warp_inverse


logger = logging.getLogger(__name__)

KIND_ORDER = [TransformKind.IDENTITY, TransformKind.ROTATE, TransformKind.SCALE, TransformKind.TRANSLATE]


class SliderSpinBox(QWidget):
    """A QDoubleSpinBox over a QSlider, both showing the same value in bounds"""
    valueChanged = pyqtSignal(float)

    def __init__(self, bounds, value, decimals=2, step=1.0, suffix="", slider_steps=1000):
        super().__init__()
        self.bounds = bounds
        self.slider_steps = slider_steps
        self.syncing = False

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)

        self.spin_box = QDoubleSpinBox()
        self.spin_box.setRange(*bounds)
        self.spin_box.setDecimals(decimals)
        self.spin_box.setSingleStep(step)
        self.spin_box.setSuffix(suffix)
        self.spin_box.setKeyboardTracking(False)
        self.spin_box.valueChanged.connect(self.on_spin_changed)
        layout.addWidget(self.spin_box)

        self.slider = QSlider(Qt.Horizontal)
        self.slider.setRange(0, slider_steps)
        self.slider.valueChanged.connect(self.on_slider_changed)
        layout.addWidget(self.slider)

        self.setLayout(layout)
        self.setValue(value)
        # setValue does not signal when the value is unchanged
        self.syncing = True
        self.slider.setValue(self.to_slider(self.spin_box.value()))
        self.syncing = False

    def to_slider(self, value):
        lo, hi = self.bounds
        return int(round((value - lo) / (hi - lo) * self.slider_steps))

    def from_slider(self, position):
        lo, hi = self.bounds
        return lo + (hi - lo) * position / self.slider_steps

    def value(self):
        return self.spin_box.value()

    def setValue(self, value):
        self.spin_box.setValue(value)

    def on_spin_changed(self, value):
        if self.syncing:
            return
        self.syncing = True
        self.slider.setValue(self.to_slider(value))
        self.syncing = False
        self.valueChanged.emit(value)

    def on_slider_changed(self, position):
        if self.syncing:
            return
        # the spin box rounds to its decimals; report what it holds
        self.syncing = True
        self.spin_box.setValue(self.from_slider(position))
        self.syncing = False
        self.valueChanged.emit(self.spin_box.value())


class SlotWidget(QWidget):
    """Editor for one slot of the chain"""
    edited = pyqtSignal(int)  # slot index

    def __init__(self, index, controller):
        super().__init__()
        self.index = index
        self.controller = controller
        self.updating = False
        self.init_ui()

    def init_ui(self):
        layout = QVBoxLayout()

        self.title = QLabel()
        self.title.setFont(QFont("Arial", 10, QFont.Bold))
        layout.addWidget(self.title)

        # one page of editors per kind, same order as KIND_ORDER
        self.pages = QStackedWidget()

        self.pages.addWidget(QLabel("Eye"))

        rot_page = QWidget()
        rot_layout = QVBoxLayout()
        self.angle_box = SliderSpinBox(ANGLE_RANGE, 0.0, decimals=1, suffix=" deg", slider_steps=3600)
        self.angle_box.valueChanged.connect(self.on_angle_changed)
        rot_layout.addWidget(self.angle_box)
        rot_page.setLayout(rot_layout)
        self.pages.addWidget(rot_page)

        scale_page = QWidget()
        scale_layout = QVBoxLayout()
        self.sx_box = SliderSpinBox(SCALE_RANGE, 1.0, decimals=5, step=0.05, slider_steps=5000)
        self.sy_box = SliderSpinBox(SCALE_RANGE, 1.0, decimals=5, step=0.05, slider_steps=5000)
        self.sx_box.valueChanged.connect(self.on_scale_changed)
        self.sy_box.valueChanged.connect(self.on_scale_changed)
        scale_layout.addWidget(self.sx_box)
        scale_layout.addWidget(self.sy_box)
        scale_page.setLayout(scale_layout)
        self.pages.addWidget(scale_page)

        trans_page = QWidget()
        trans_layout = QVBoxLayout()
        self.tx_box = SliderSpinBox(TRANSLATE_RANGE, 0.0, decimals=1, step=5.0, slider_steps=2000)
        self.ty_box = SliderSpinBox(TRANSLATE_RANGE, 0.0, decimals=1, step=5.0, slider_steps=2000)
        self.tx_box.valueChanged.connect(self.on_translation_changed)
        self.ty_box.valueChanged.connect(self.on_translation_changed)
        trans_layout.addWidget(self.tx_box)
        trans_layout.addWidget(self.ty_box)
        trans_page.setLayout(trans_layout)
        self.pages.addWidget(trans_page)

        layout.addWidget(self.pages)

        self.enabled_box = QCheckBox("on")
        self.enabled_box.setChecked(True)
        self.enabled_box.toggled.connect(self.on_enabled_toggled)
        layout.addWidget(self.enabled_box)

        # combo - change homography type
        self.kind_combo = QComboBox()
        self.kind_combo.setFixedWidth(100)
        for kind in KIND_ORDER:
            self.kind_combo.addItem(kind.label)
        self.kind_combo.currentIndexChanged.connect(self.on_kind_changed)
        self.kind_combo.activated.connect(self.on_kind_activated)
        layout.addWidget(self.kind_combo)

        layout.addStretch()
        self.setLayout(layout)
        self.sync_from_controller()

    def sync_from_controller(self):
        """Show the controller's state for this slot without feeding it back"""
        slot = self.controller[self.index]
        self.updating = True
        self.title.setText(f"#{self.index + 1} {slot.kind.label}")
        self.kind_combo.setCurrentIndex(KIND_ORDER.index(slot.kind))
        self.pages.setCurrentIndex(KIND_ORDER.index(slot.kind))
        self.enabled_box.setChecked(slot.enabled)
        params = dict(DEFAULT_PARAMS[TransformKind.ROTATE])
        params.update(DEFAULT_PARAMS[TransformKind.SCALE])
        params.update(DEFAULT_PARAMS[TransformKind.TRANSLATE])
        params.update(slot.params)
        self.angle_box.setValue(params["angle_degrees"])
        self.sx_box.setValue(params["sx"])
        self.sy_box.setValue(params["sy"])
        self.tx_box.setValue(params["tx"])
        self.ty_box.setValue(params["ty"])
        self.updating = False

    def on_kind_changed(self, combo_index):
        if self.updating:
            return
        self.controller.set_kind(self.index, KIND_ORDER[combo_index])
        self.sync_from_controller()
        self.edited.emit(self.index)

    def on_kind_activated(self, combo_index):
        # picking the kind that is already shown resets its parameters;
        # a real change is handled by on_kind_changed
        if self.updating or KIND_ORDER[combo_index] is not self.controller[self.index].kind:
            return
        self.on_kind_changed(combo_index)

    def on_angle_changed(self, value):
        if self.updating:
            return
        self.controller.set_angle(self.index, value)
        self.edited.emit(self.index)

    def on_scale_changed(self, _value):
        if self.updating:
            return
        self.controller.set_scale(self.index, self.sx_box.value(), self.sy_box.value())
        self.edited.emit(self.index)

    def on_translation_changed(self, _value):
        if self.updating:
            return
        self.controller.set_translation(self.index, self.tx_box.value(), self.ty_box.value())
        self.edited.emit(self.index)

    def on_enabled_toggled(self, checked):
        if self.updating:
            return
        self.controller.set_enabled(self.index, checked)
        self.edited.emit(self.index)


class MatrixReadout(QWidget):
    """Read-only 3x3 grid showing the net homography"""

    def __init__(self, label):
        super().__init__()
        layout = QVBoxLayout()
        title = QLabel(label)
        title.setFont(QFont("Arial", 10, QFont.Bold))
        layout.addWidget(title)

        grid = QGridLayout()
        self.cells = []
        for i in range(3):
            row = []
            for j in range(3):
                cell = QLabel()
                cell.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
                cell.setFont(QFont("Courier", 10))
                grid.addWidget(cell, i, j)
                row.append(cell)
            self.cells.append(row)
        layout.addLayout(grid)

        self.status = QLabel()
        layout.addWidget(self.status)
        self.setLayout(layout)

    def set_matrix(self, H, singular=False):
        for i, row_text in enumerate(format_matrix(H)):
            for j, value in enumerate(row_text.split()):
                self.cells[i][j].setText(value)
        self.status.setText("singular: output is fill color" if singular else "")


class MainWindow(QMainWindow):
    def __init__(self, source: Raster, controller: ChainController = None):
        super().__init__()
        self.source = source
        self.controller = controller if controller is not None else ChainController()
        self.H = np.eye(3)
        self.singular = False
        self.init_ui()

        # render as fast as the event loop allows
        self.timer = QTimer(self)
        self.timer.setInterval(0)
        self.timer.timeout.connect(self.tick)
        self.timer.start()

    def init_ui(self):
        self.setWindowTitle(WINDOW_TITLE)
        self.setGeometry(100, 100, 1400, 900)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout()

        slots_row = QWidget()
        slots_layout = QHBoxLayout()
        self.slot_widgets = []
        for index in range(len(self.controller)):
            slot_widget = SlotWidget(index, self.controller)
            slot_widget.edited.connect(self.on_slot_edited)
            slots_layout.addWidget(slot_widget)
            self.slot_widgets.append(slot_widget)
        slots_row.setLayout(slots_layout)

        scroll = QScrollArea()
        scroll.setWidget(slots_row)
        scroll.setWidgetResizable(True)
        scroll.setMaximumHeight(220)
        main_layout.addWidget(scroll)

        bottom_layout = QHBoxLayout()

        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        bottom_layout.addWidget(self.image_label, 3)

        right_layout = QVBoxLayout()
        self.H_readout = MatrixReadout("Homography H")
        right_layout.addWidget(self.H_readout)
        reset_button = QPushButton("Reset all")
        reset_button.clicked.connect(self.on_reset_all)
        right_layout.addWidget(reset_button)
        right_layout.addStretch()
        bottom_layout.addLayout(right_layout, 1)

        main_layout.addLayout(bottom_layout)
        central_widget.setLayout(main_layout)

    def on_slot_edited(self, index):
        self.statusBar().showMessage(f"slot #{index + 1}: {self.controller[index]!r}")

    def on_reset_all(self):
        self.controller.reset_all()
        for slot_widget in self.slot_widgets:
            slot_widget.sync_from_controller()
        self.statusBar().showMessage("all slots reset")

    def tick(self):
        """One frame: recompose H, invert it once, warp, show"""
        self.H = self.controller.current_matrix()
        try:
            H_inv = invert(self.H)
        except SingularTransformError as e:
            H_inv = None
            if not self.singular:
                logger.warning("chain became singular (%s), showing fill color", e)
        else:
            if self.singular:
                logger.info("chain is invertible again")
        self.singular = H_inv is None
        self.H_readout.set_matrix(self.H, self.singular)

        warped = warp_inverse(self.source, H_inv)
        self.image_label.setPixmap(QPixmap.fromImage(warped.to_qimage()))


def main():
    setup_logging()
    image_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_IMAGE_PATH
    source = load_or_generate(image_path)

    app = QApplication(sys.argv)
    window = MainWindow(source)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
