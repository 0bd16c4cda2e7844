# ui_main_window.py
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QRectF, Qt, Slot
from PySide6.QtGui import QCloseEvent, QColor, QFont, QPainter, QPen
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QSizePolicy,
    QStatusBar,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from errors import ValidationError
from gauge import HUM_RANGE, TEMP_RANGE, format_measure, gauge_color, map_gauge
from history import ReadingsTableModel, trend_series
from limit_control import LimitControl
from models import Stats
from poll_controller import PollController


class RadialGauge(QWidget):
    """Medidor semicircular: arco de fondo + arco relleno según el valor."""

    ARC_WIDTH = 18

    def __init__(self, label: str, unit: str, minimum: float, maximum: float, parent=None) -> None:
        super().__init__(parent)
        self.label = label
        self.unit = unit
        self.minimum = minimum
        self.maximum = maximum
        self.value: Optional[float] = None
        self.position = map_gauge(None, minimum, maximum)

        self.setMinimumSize(240, 150)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)

    def set_value(self, value: Optional[float]) -> None:
        self.value = value
        self.position = map_gauge(value, self.minimum, self.maximum)
        self.update()

    def text(self) -> str:
        return format_measure(self.value, self.unit)

    def _font(self, size: int, bold: bool = False) -> QFont:
        font = QFont(self.font())
        font.setPointSize(size)
        if bold:
            font.setWeight(QFont.DemiBold)
        return font

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        side = min(self.width(), self.height() * 2) - 2 * self.ARC_WIDTH
        rect = QRectF(
            (self.width() - side) / 2,
            self.ARC_WIDTH + 16,
            side,
            side,
        )

        # Fondo
        pen = QPen(QColor("#e5e7eb"), self.ARC_WIDTH)
        pen.setCapStyle(Qt.RoundCap)
        painter.setPen(pen)
        painter.drawArc(rect, 180 * 16, -180 * 16)

        # Valor (ángulos en 1/16 de grado, en sentido horario desde la izquierda)
        if not self.position.empty and self.position.percent > 0:
            pen.setColor(QColor(gauge_color(self.position.percent)))
            painter.setPen(pen)
            painter.drawArc(rect, 180 * 16, int(-180 * 16 * self.position.percent))

        painter.setPen(QColor("#64748b"))
        painter.setFont(self._font(9, bold=True))
        painter.drawText(QRectF(0, 0, self.width(), 16), Qt.AlignCenter, self.label.upper())

        painter.setPen(QColor("#0f172a"))
        painter.setFont(self._font(20, bold=True))
        value_rect = QRectF(0, rect.center().y() - 36, self.width(), 36)
        painter.drawText(value_rect, Qt.AlignCenter, self.text())

        painter.setPen(QColor("#94a3b8"))
        painter.setFont(self._font(8))
        bottom = QRectF(0, rect.center().y() + 2, self.width(), 16)
        painter.drawText(bottom, Qt.AlignCenter, f"Min {self.minimum:g} {self.unit}   ·   Max {self.maximum:g} {self.unit}")
        painter.end()


class StatCard(QFrame):
    def __init__(self, title: str, unit: str, parent=None) -> None:
        super().__init__(parent)
        self.title = title
        self.unit = unit
        self.setFrameShape(QFrame.StyledPanel)
        self.setObjectName("statCard")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 6, 10, 6)

        self.lbl_title = QLabel()
        self.lbl_title.setStyleSheet("font-size: 13px; font-weight: 600;")
        self.lbl_values = QLabel()
        self.lbl_values.setAlignment(Qt.AlignCenter)

        layout.addWidget(self.lbl_title)
        layout.addWidget(self.lbl_values)
        self.set_stats(None)

    def set_stats(self, stats: Optional[Stats]) -> None:
        count = stats.count if stats else 0
        self.lbl_title.setText(f"{self.title} · {count} lecturas")
        if stats is None:
            self.lbl_values.setText("min: --   max: --   μ: --")
            return
        self.lbl_values.setText(
            f"min: {format_measure(stats.min, self.unit)}   "
            f"max: {format_measure(stats.max, self.unit)}   "
            f"μ: {format_measure(stats.average, self.unit)}"
        )


class MainWindow(QMainWindow):
    def __init__(self, controller: PollController, parent=None) -> None:
        super().__init__(parent)
        self.controller = controller
        self.limit_control = LimitControl(controller)

        self.setWindowTitle("Estación meteorológica ESP")

        # ===================== LAYOUT PRINCIPAL =====================
        central = QWidget(self)
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(6, 6, 6, 6)
        main_layout.setSpacing(8)

        # --------- CABECERA ----------
        header = QHBoxLayout()
        title_box = QVBoxLayout()
        title = QLabel("Estación meteorológica ESP")
        title.setStyleSheet("font-size: 18px; font-weight: 700;")
        interval_s = controller.timer.interval() / 1000
        self.subtitle = QLabel(
            f"Panel en directo de {controller.sensor_id}. Se actualiza cada {interval_s:g} segundos."
        )
        self.subtitle.setStyleSheet("color: gray;")
        title_box.addWidget(title)
        title_box.addWidget(self.subtitle)

        self.updated_label = QLabel("Esperando lecturas...")
        self.updated_label.setObjectName("updatedBadge")

        header.addLayout(title_box)
        header.addStretch()
        header.addWidget(self.updated_label)
        main_layout.addLayout(header)

        # --------- FORMULARIO DE LÍMITE ----------
        form_frame = QFrame()
        form_frame.setFrameShape(QFrame.StyledPanel)
        form = QHBoxLayout(form_frame)

        form_text = QVBoxLayout()
        lbl_limit = QLabel("Número de lecturas")
        lbl_limit.setStyleSheet("font-weight: 600;")
        self.limit_hint = QLabel()
        form_text.addWidget(lbl_limit)
        form_text.addWidget(self.limit_hint)

        self.limit_input = QLineEdit(str(controller.limit))
        self.limit_input.setMaximumWidth(100)
        self.limit_input.setAlignment(Qt.AlignRight)
        self.limit_input.returnPressed.connect(self.submit_limit)

        self.btn_update = QPushButton("Actualizar")
        self.btn_update.setCursor(Qt.PointingHandCursor)
        self.btn_update.setMinimumHeight(30)
        self.btn_update.clicked.connect(self.submit_limit)

        form.addLayout(form_text)
        form.addStretch()
        form.addWidget(self.limit_input)
        form.addWidget(self.btn_update)
        main_layout.addWidget(form_frame)

        # --------- ÚLTIMA LECTURA + ERROR ----------
        self.last_reading_label = QLabel("Última lectura: sin lecturas todavía")
        main_layout.addWidget(self.last_reading_label)

        self.error_label = QLabel()
        self.error_label.setObjectName("errorBanner")
        self.error_label.setWordWrap(True)
        self.error_label.setVisible(False)
        main_layout.addWidget(self.error_label)

        # --------- MEDIDORES ----------
        gauges = QHBoxLayout()
        self.temp_gauge = RadialGauge("Temperatura", "°C", *TEMP_RANGE)
        self.hum_gauge = RadialGauge("Humedad", "%", *HUM_RANGE)
        gauges.addWidget(self.temp_gauge)
        gauges.addWidget(self.hum_gauge)
        main_layout.addLayout(gauges)

        # --------- ESTADÍSTICAS ----------
        stats_row = QHBoxLayout()
        self.temp_card = StatCard("Temperatura", "°C")
        self.hum_card = StatCard("Humedad", "%")
        self.pressure_card = StatCard("Presión", "hPa")
        stats_row.addWidget(self.temp_card)
        stats_row.addWidget(self.hum_card)
        stats_row.addWidget(self.pressure_card)
        main_layout.addLayout(stats_row)

        # --------- GRÁFICA MATPLOTLIB ----------
        self.figure = Figure(figsize=(7, 3))
        self.canvas = FigureCanvas(self.figure)
        self.canvas.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.ax_temp = self.figure.add_subplot(2, 1, 1)
        self.ax_hum = self.figure.add_subplot(2, 1, 2, sharex=self.ax_temp)
        main_layout.addWidget(self.canvas)

        # --------- TABLA HISTÓRICA ----------
        self.table_title = QLabel()
        self.table_title.setStyleSheet("font-size: 14px; font-weight: 600;")
        self.refreshing_label = QLabel("Actualizando...")
        self.refreshing_label.setStyleSheet("color: #0284c7; font-weight: 600;")
        self.refreshing_label.setVisible(False)
        table_header = QHBoxLayout()
        table_header.addWidget(self.table_title)
        table_header.addStretch()
        table_header.addWidget(self.refreshing_label)
        main_layout.addLayout(table_header)

        self.table_model = ReadingsTableModel(self)
        self.table = QTableView()
        self.table.setModel(self.table_model)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setAlternatingRowColors(True)
        main_layout.addWidget(self.table)

        self.empty_label = QLabel("Aún no hay lecturas disponibles.")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet("color: gray;")
        main_layout.addWidget(self.empty_label)

        # --------- STATUS BAR ----------
        self.setStatusBar(QStatusBar())
        self._apply_light_palette()

        # ===================== SEÑALES =====================
        controller.readings_changed.connect(self._refresh_readings)
        controller.fetching_changed.connect(self._on_fetching_changed)
        controller.error_changed.connect(self._on_error_changed)

        self._update_limit_labels()
        self._refresh_readings()

    # ===================== CONTROL DE SONDEO =====================
    def start(self) -> None:
        self.controller.start()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.controller.stop()
        super().closeEvent(event)

    @Slot()
    def submit_limit(self) -> None:
        try:
            limit = self.limit_control.commit(self.limit_input.text())
        except ValidationError as e:
            # el mensaje ya se muestra en el banner de error
            self.statusBar().showMessage(str(e), 3000)
            return
        self._update_limit_labels()
        self.statusBar().showMessage(f"Usando las últimas {limit} lecturas.", 2000)

    def _update_limit_labels(self) -> None:
        limit = self.controller.limit
        self.limit_hint.setText(f"Usando las últimas {limit} lecturas.")
        self.table_title.setText(f"Últimas {limit} lecturas")

    # ===================== ESTADO =====================
    @Slot(bool)
    def _on_fetching_changed(self, fetching: bool) -> None:
        self.btn_update.setEnabled(not fetching)
        self.btn_update.setText("Actualizando..." if fetching else "Actualizar")
        self.refreshing_label.setVisible(fetching)

    @Slot(str)
    def _on_error_changed(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.setVisible(bool(message))

    @Slot()
    def _refresh_readings(self) -> None:
        store = self.controller.store
        latest = store.latest()

        last_updated = self.controller.last_updated
        if last_updated is not None:
            self.updated_label.setText(f"Actualizado {last_updated:%H:%M:%S}")

        ts = latest.effective_time if latest else None
        self.last_reading_label.setText(
            "Última lectura: "
            + (ts.astimezone().strftime("%Y-%m-%d %H:%M:%S") if ts else "sin lecturas todavía")
        )

        self.temp_gauge.set_value(latest.temperature if latest else None)
        self.hum_gauge.set_value(latest.humidity if latest else None)

        self.temp_card.set_stats(store.temperature_stats())
        self.hum_card.set_stats(store.humidity_stats())
        self.pressure_card.set_stats(store.pressure_stats())

        self.table_model.set_readings(store.readings)
        self.empty_label.setVisible(len(store) == 0)

        self._update_plots()

    # ===================== GRÁFICAS =====================
    def _update_plots(self) -> None:
        points = trend_series(self.controller.store.readings)

        self.ax_temp.clear()
        self.ax_hum.clear()

        if points:
            times = [p[0] for p in points]
            self.ax_temp.plot(times, [p[1] for p in points], color="#f97316")
            self.ax_hum.plot(times, [p[2] for p in points], color="#0ea5e9")
            self.figure.autofmt_xdate()

        self.ax_temp.set_ylabel("Temp (°C)")
        self.ax_temp.grid(True)
        self.ax_hum.set_ylabel("Humedad (%)")
        self.ax_hum.set_xlabel("Tiempo")
        self.ax_hum.grid(True)

        self.canvas.draw_idle()

    # ===================== ESTILO =====================
    def _apply_light_palette(self) -> None:
        light_style = """
        QMainWindow {
            background-color: #f0f9ff;
        }
        QPushButton {
            background-color: #0284c7;
            color: #ffffff;
            border-radius: 4px;
            padding: 4px 10px;
        }
        QPushButton:disabled {
            background-color: #94a3b8;
        }
        #statCard {
            background-color: #ffffff;
            border-radius: 6px;
        }
        #updatedBadge {
            background-color: #ffffff;
            border: 1px solid #e2e8f0;
            border-radius: 10px;
            padding: 4px 10px;
            color: #475569;
        }
        #errorBanner {
            background-color: #fffbeb;
            border: 1px solid #fcd34d;
            border-radius: 4px;
            padding: 4px 8px;
            color: #92400e;
        }
        """
        self.setStyleSheet(light_style)
