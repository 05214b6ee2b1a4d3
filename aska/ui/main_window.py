"""Main PyQt window for the ASKA invoicing app."""

from __future__ import annotations

import logging
from typing import List, Optional

from PyQt5.QtCore import QDate, Qt
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QDateEdit,
    QDoubleSpinBox,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from aska import config
from aska.billing import InvoiceBook, ItemDraft
from aska.data.excel_export import export_invoices_excel
from aska.data.local_storage import JsonDirectoryStorage
from aska.data.sample_data import initialize_sample_data
from aska.models import INVOICE_TYPE_LABELS, INVOICE_TYPES, Invoice, InvoiceType
from aska.printing.invoice_printer import InvoicePrinter
from aska.reports import customer_display_name, dashboard_stats, search_customers, search_invoices
from aska.totals import compute_totals, format_currency
from aska.validation import validate_customer, validate_invoice_draft

logger = logging.getLogger(__name__)

ITEM_HEADERS = ["الوصف (عربي)", "Description", "الكمية", "السعر", "الإجمالي"]


def _read_table_text(table: QTableWidget, row: int, col: int) -> str:
    item = table.item(row, col)
    return item.text().strip() if item else ""


def _to_float(value: str, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value: str, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


class MainWindow(QMainWindow):
    """Tabs for dashboard, customers, invoices, new invoice and settings."""

    def __init__(self, book: Optional[InvoiceBook] = None, printer: Optional[InvoicePrinter] = None) -> None:
        super().__init__()
        self.setWindowTitle("ASKA Invoice")
        self.setMinimumSize(1000, 650)
        self.setLayoutDirection(Qt.RightToLeft)

        self.book: Optional[InvoiceBook] = book
        self.printer = printer or InvoicePrinter()
        self._listed_invoices: List[Invoice] = []
        self._editing_customer_id: Optional[str] = None

        self._build_ui()
        if self.book is None:
            self._open_book()
        self.refresh_all()

    # -- construction --

    def _build_ui(self) -> None:
        self.tabs = QTabWidget()
        self.tabs.addTab(self._build_dashboard_tab(), "لوحة التحكم")
        self.tabs.addTab(self._build_customers_tab(), "العملاء")
        self.tabs.addTab(self._build_invoices_tab(), "الفواتير")
        self.tabs.addTab(self._build_new_invoice_tab(), "فاتورة جديدة")
        self.tabs.addTab(self._build_settings_tab(), "الإعدادات")
        self.tabs.currentChanged.connect(lambda _index: self.refresh_all())
        self.setCentralWidget(self.tabs)

    def _build_dashboard_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout()

        stats = QFormLayout()
        self.stat_invoices = QLabel("0")
        self.stat_customers = QLabel("0")
        self.stat_revenue = QLabel("0.00")
        self.stat_types = QLabel("-")
        stats.addRow("إجمالي الفواتير:", self.stat_invoices)
        stats.addRow(f"الإيرادات ({config.RECENT_REVENUE_DAYS} يوم):", self.stat_revenue)
        stats.addRow("العملاء:", self.stat_customers)
        stats.addRow("أنواع الفواتير:", self.stat_types)
        layout.addLayout(stats)

        self.recent_table = self._make_table(["رقم الفاتورة", "العميل", "النوع", "الإجمالي"])
        layout.addWidget(QLabel("أحدث الفواتير"))
        layout.addWidget(self.recent_table, 1)
        tab.setLayout(layout)
        return tab

    def _build_customers_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout()

        self.customer_search = QLineEdit()
        self.customer_search.setPlaceholderText("بحث بالاسم أو الهاتف أو العنوان...")
        self.customer_search.textChanged.connect(lambda _text: self._refresh_customers())
        layout.addWidget(self.customer_search)

        self.customers_table = self._make_table(["الاسم", "الهاتف", "العنوان", "الرقم الضريبي", "ملاحظات"])
        layout.addWidget(self.customers_table, 1)

        self.customer_form = QGroupBox("إضافة عميل")
        form = QFormLayout()
        self.customer_name = QLineEdit()
        self.customer_phone = QLineEdit()
        self.customer_address = QLineEdit()
        self.customer_tax = QLineEdit()
        self.customer_notes = QLineEdit()
        form.addRow("الاسم", self.customer_name)
        form.addRow("الهاتف", self.customer_phone)
        form.addRow("العنوان", self.customer_address)
        form.addRow("الرقم الضريبي", self.customer_tax)
        form.addRow("ملاحظات", self.customer_notes)
        self.customer_form.setLayout(form)
        layout.addWidget(self.customer_form)

        buttons = QHBoxLayout()
        self.save_customer_button = QPushButton("إضافة")
        self.save_customer_button.clicked.connect(self._save_customer)
        edit_button = QPushButton("تعديل المحدد")
        edit_button.clicked.connect(self._edit_customer)
        cancel_button = QPushButton("إلغاء")
        cancel_button.clicked.connect(self._reset_customer_form)
        delete_button = QPushButton("حذف المحدد")
        delete_button.clicked.connect(self._delete_customer)
        buttons.addWidget(self.save_customer_button)
        buttons.addWidget(edit_button)
        buttons.addWidget(cancel_button)
        buttons.addWidget(delete_button)
        buttons.addStretch()
        layout.addLayout(buttons)

        tab.setLayout(layout)
        return tab

    def _build_invoices_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout()

        filters = QHBoxLayout()
        self.invoice_search = QLineEdit()
        self.invoice_search.setPlaceholderText("بحث برقم الفاتورة أو العميل أو الملاحظات...")
        self.invoice_search.textChanged.connect(lambda _text: self._refresh_invoices())
        self.invoice_type_filter = QComboBox()
        self.invoice_type_filter.addItem("الكل", None)
        for invoice_type in INVOICE_TYPES:
            self.invoice_type_filter.addItem(INVOICE_TYPE_LABELS[invoice_type], invoice_type)
        self.invoice_type_filter.currentIndexChanged.connect(lambda _index: self._refresh_invoices())
        filters.addWidget(self.invoice_search, 1)
        filters.addWidget(self.invoice_type_filter)
        layout.addLayout(filters)

        self.invoices_table = self._make_table(["رقم الفاتورة", "النوع", "العميل", "التاريخ", "الإجمالي"])
        layout.addWidget(self.invoices_table, 1)

        buttons = QHBoxLayout()
        for label, handler in (
            ("طباعة", self._print_selected),
            ("تحميل PDF", self._export_selected_pdf),
            ("تصدير Excel", self._export_excel),
            ("حذف", self._delete_invoice),
        ):
            button = QPushButton(label)
            button.clicked.connect(handler)
            buttons.addWidget(button)
        buttons.addStretch()
        layout.addLayout(buttons)

        tab.setLayout(layout)
        return tab

    def _build_new_invoice_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout()

        header = QFormLayout()
        self.number_preview = QLabel("-")
        self.new_customer = QComboBox()
        self.new_type = QComboBox()
        for invoice_type in INVOICE_TYPES:
            self.new_type.addItem(INVOICE_TYPE_LABELS[invoice_type], invoice_type)
        self.new_type.currentIndexChanged.connect(self._toggle_due_date)
        self.issue_date = QDateEdit(QDate.currentDate())
        self.issue_date.setCalendarPopup(True)
        self.due_date = QDateEdit(QDate.currentDate().addDays(30))
        self.due_date.setCalendarPopup(True)
        self.due_date.setEnabled(False)
        self.new_notes = QLineEdit()
        header.addRow("رقم الفاتورة", self.number_preview)
        header.addRow("العميل", self.new_customer)
        header.addRow("النوع", self.new_type)
        header.addRow("تاريخ الإصدار", self.issue_date)
        header.addRow("تاريخ الاستحقاق", self.due_date)
        header.addRow("ملاحظات", self.new_notes)
        layout.addLayout(header)

        self.items_table = QTableWidget(0, len(ITEM_HEADERS))
        self.items_table.setHorizontalHeaderLabels(ITEM_HEADERS)
        self.items_table.horizontalHeader().setStretchLastSection(True)
        self.items_table.itemChanged.connect(self._on_item_changed)
        layout.addWidget(self.items_table, 1)

        row_buttons = QHBoxLayout()
        add_row = QPushButton("إضافة عنصر")
        add_row.clicked.connect(self._add_item_row)
        remove_row = QPushButton("حذف العنصر")
        remove_row.clicked.connect(self._remove_item_row)
        row_buttons.addWidget(add_row)
        row_buttons.addWidget(remove_row)
        row_buttons.addStretch()
        layout.addLayout(row_buttons)

        totals = QFormLayout()
        self.tax_spin = QDoubleSpinBox()
        self.tax_spin.setRange(0, 100)
        self.tax_spin.valueChanged.connect(self._update_totals)
        self.discount_spin = QDoubleSpinBox()
        self.discount_spin.setRange(0, 100)
        self.discount_spin.valueChanged.connect(self._update_totals)
        self.subtotal_label = QLabel("0.00")
        self.discount_label = QLabel("0.00")
        self.tax_label = QLabel("0.00")
        self.total_label = QLabel("0.00")
        total_font = QFont()
        total_font.setPointSize(16)
        total_font.setBold(True)
        self.total_label.setFont(total_font)
        totals.addRow("الضريبة %", self.tax_spin)
        totals.addRow("الخصم %", self.discount_spin)
        totals.addRow("المجموع الفرعي", self.subtotal_label)
        totals.addRow("الخصم", self.discount_label)
        totals.addRow("الضريبة", self.tax_label)
        totals.addRow("الإجمالي", self.total_label)
        layout.addLayout(totals)

        save_button = QPushButton("حفظ الفاتورة")
        save_button.clicked.connect(self._save_invoice)
        layout.addWidget(save_button)

        tab.setLayout(layout)
        self._reset_new_invoice()
        return tab

    def _build_settings_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout()
        form = QFormLayout()
        self.company_name = QLineEdit()
        self.company_address = QLineEdit()
        self.company_phone = QLineEdit()
        self.default_tax = QDoubleSpinBox()
        self.default_tax.setRange(0, 100)
        form.addRow("اسم الشركة", self.company_name)
        form.addRow("العنوان", self.company_address)
        form.addRow("الهاتف", self.company_phone)
        form.addRow("الضريبة الافتراضية %", self.default_tax)
        layout.addLayout(form)

        save_button = QPushButton("حفظ الإعدادات")
        save_button.clicked.connect(self._save_settings)
        reset_button = QPushButton("استعادة الافتراضي")
        reset_button.clicked.connect(self._reset_settings)
        settings_buttons = QHBoxLayout()
        settings_buttons.addWidget(save_button)
        settings_buttons.addWidget(reset_button)
        settings_buttons.addStretch()
        layout.addLayout(settings_buttons)
        layout.addStretch()
        tab.setLayout(layout)
        return tab

    @staticmethod
    def _make_table(headers: List[str]) -> QTableWidget:
        table = QTableWidget(0, len(headers))
        table.setHorizontalHeaderLabels(headers)
        table.horizontalHeader().setStretchLastSection(True)
        table.setSelectionBehavior(QAbstractItemView.SelectRows)
        table.setSelectionMode(QAbstractItemView.SingleSelection)
        table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        return table

    @staticmethod
    def _fill_table(table: QTableWidget, rows: List[List[str]], ids: Optional[List[str]] = None) -> None:
        table.setRowCount(len(rows))
        for row, values in enumerate(rows):
            for col, value in enumerate(values):
                cell = QTableWidgetItem(value)
                if ids is not None and col == 0:
                    cell.setData(Qt.UserRole, ids[row])
                table.setItem(row, col, cell)
        table.resizeColumnsToContents()

    # -- data --

    def _open_book(self) -> None:
        try:
            self.book = InvoiceBook.open(JsonDirectoryStorage())
            initialize_sample_data(self.book)
        except OSError as exc:
            logger.exception("Failed to open data directory")
            QMessageBox.critical(self, "خطأ في البيانات", f"تعذر فتح مجلد البيانات: {exc}")
            self.tabs.setEnabled(False)
            self.book = None

    def refresh_all(self) -> None:
        if not self.book:
            return
        self._refresh_dashboard()
        self._refresh_customers()
        self._refresh_invoices()
        self._refresh_new_invoice_choices()
        self._load_settings()

    def _refresh_dashboard(self) -> None:
        invoices = self.book.invoices.get_all()
        customers = self.book.customers.get_all()
        stats = dashboard_stats(invoices, customers)
        self.stat_invoices.setText(str(stats.total_invoices))
        self.stat_customers.setText(str(stats.total_customers))
        self.stat_revenue.setText(f"{format_currency(stats.recent_revenue)} {config.CURRENCY_LABEL}")
        self.stat_types.setText(
            "، ".join(
                f"{INVOICE_TYPE_LABELS.get(kind, kind)}: {count}"
                for kind, count in stats.type_breakdown.items()
            )
            or "-"
        )
        self._fill_table(
            self.recent_table,
            [
                [
                    invoice.number,
                    customer_display_name(customers, invoice.customer_id),
                    invoice.type_label,
                    format_currency(invoice.total),
                ]
                for invoice in stats.recent_invoices
            ],
        )

    def _refresh_customers(self) -> None:
        if not self.book:
            return
        customers = search_customers(self.book.customers.get_all(), self.customer_search.text())
        self._fill_table(
            self.customers_table,
            [
                [c.name, c.phone, c.address, c.tax_number or "", c.notes or ""]
                for c in customers
            ],
            [c.id for c in customers],
        )

    def _refresh_invoices(self) -> None:
        if not self.book:
            return
        customers = self.book.customers.get_all()
        self._listed_invoices = search_invoices(
            self.book.invoices.get_all(),
            customers,
            self.invoice_search.text(),
            self.invoice_type_filter.currentData(),
        )
        self._fill_table(
            self.invoices_table,
            [
                [
                    invoice.number,
                    invoice.type_label,
                    customer_display_name(customers, invoice.customer_id),
                    invoice.issue_date,
                    format_currency(invoice.total),
                ]
                for invoice in self._listed_invoices
            ],
            [invoice.id for invoice in self._listed_invoices],
        )

    def _refresh_new_invoice_choices(self) -> None:
        selected = self.new_customer.currentData()
        self.new_customer.clear()
        self.new_customer.addItem("اختر العميل", None)
        for customer in search_customers(self.book.customers.get_all()):
            self.new_customer.addItem(customer.name, customer.id)
        index = self.new_customer.findData(selected)
        self.new_customer.setCurrentIndex(max(index, 0))
        self.number_preview.setText(self.book.numbering.peek())

    def _load_settings(self) -> None:
        settings = self.book.settings.get()
        self.company_name.setText(settings.company_name)
        self.company_address.setText(settings.company_address)
        self.company_phone.setText(settings.company_phone)
        self.default_tax.setValue(settings.default_tax_percent)

    @staticmethod
    def _selected_id(table: QTableWidget) -> Optional[str]:
        row = table.currentRow()
        if row < 0 or table.item(row, 0) is None:
            return None
        return table.item(row, 0).data(Qt.UserRole)

    # -- customers --

    def _save_customer(self) -> None:
        name = self.customer_name.text()
        phone = self.customer_phone.text()
        address = self.customer_address.text()
        errors = validate_customer(name, phone, address)
        if errors:
            QMessageBox.warning(self, "تنبيه", "\n".join(errors))
            return
        try:
            saved = self.book.save_customer(
                name,
                phone,
                address,
                tax_number=self.customer_tax.text(),
                notes=self.customer_notes.text(),
                customer_id=self._editing_customer_id,
            )
        except OSError as exc:
            QMessageBox.critical(self, "خطأ", f"تعذر حفظ العميل: {exc}")
            return
        if saved is None:
            QMessageBox.warning(self, "تنبيه", "لم يعد هذا العميل موجوداً")
        self._reset_customer_form()
        self.refresh_all()

    def _edit_customer(self) -> None:
        customer_id = self._selected_id(self.customers_table)
        customer = self.book.customers.get(customer_id) if customer_id else None
        if customer is None:
            QMessageBox.information(self, "تنبيه", "يرجى اختيار عميل أولاً")
            return
        self._editing_customer_id = customer.id
        self.customer_name.setText(customer.name)
        self.customer_phone.setText(customer.phone)
        self.customer_address.setText(customer.address)
        self.customer_tax.setText(customer.tax_number or "")
        self.customer_notes.setText(customer.notes or "")
        self.customer_form.setTitle("تعديل عميل")
        self.save_customer_button.setText("حفظ التعديل")

    def _reset_customer_form(self) -> None:
        self._editing_customer_id = None
        for field in (self.customer_name, self.customer_phone, self.customer_address,
                      self.customer_tax, self.customer_notes):
            field.clear()
        self.customer_form.setTitle("إضافة عميل")
        self.save_customer_button.setText("إضافة")

    def _delete_customer(self) -> None:
        customer_id = self._selected_id(self.customers_table)
        if not customer_id:
            QMessageBox.information(self, "تنبيه", "يرجى اختيار عميل أولاً")
            return
        answer = QMessageBox.question(self, "تأكيد", "هل تريد حذف هذا العميل؟")
        if answer != QMessageBox.Yes:
            return
        self.book.customers.delete(customer_id)
        if customer_id == self._editing_customer_id:
            self._reset_customer_form()
        self.refresh_all()

    # -- invoices --

    def _selected_invoice(self) -> Optional[Invoice]:
        invoice_id = self._selected_id(self.invoices_table)
        if not invoice_id:
            QMessageBox.information(self, "تنبيه", "يرجى اختيار فاتورة أولاً")
            return None
        invoice = self.book.invoices.get(invoice_id)
        if invoice is None:
            QMessageBox.warning(self, "تنبيه", "الفاتورة غير موجودة")
        return invoice

    def _print_selected(self) -> None:
        invoice = self._selected_invoice()
        if invoice is None:
            return
        if not self.printer.print_invoice(invoice, self.book.customer_for(invoice), self.book.settings.get()):
            QMessageBox.critical(self, "خطأ في الطابعة", "الطابعة غير متاحة")

    def _export_selected_pdf(self) -> None:
        invoice = self._selected_invoice()
        if invoice is None:
            return
        path, _ = QFileDialog.getSaveFileName(self, "حفظ PDF", f"{invoice.number}.pdf", "PDF (*.pdf)")
        if not path:
            return
        try:
            self.printer.export_pdf(invoice, self.book.customer_for(invoice), self.book.settings.get(), path)
        except OSError as exc:
            QMessageBox.critical(self, "خطأ", f"حدث خطأ أثناء إنشاء ملف PDF: {exc}")
            return
        QMessageBox.information(self, "تم", f"تم حفظ الملف: {path}")

    def _export_excel(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "تصدير Excel", "invoices.xlsx", "Excel (*.xlsx)")
        if not path:
            return
        try:
            export_invoices_excel(self._listed_invoices, self.book.customers.get_all(), path)
        except OSError as exc:
            QMessageBox.critical(self, "خطأ", f"تعذر تصدير الملف: {exc}")
            return
        QMessageBox.information(self, "تم", f"تم تصدير {len(self._listed_invoices)} فاتورة")

    def _delete_invoice(self) -> None:
        invoice = self._selected_invoice()
        if invoice is None:
            return
        answer = QMessageBox.question(self, "تأكيد", f"هل تريد حذف الفاتورة {invoice.number}؟")
        if answer != QMessageBox.Yes:
            return
        self.book.invoices.delete(invoice.id)
        self.refresh_all()

    # -- new invoice --

    def _toggle_due_date(self) -> None:
        self.due_date.setEnabled(self.new_type.currentData() == InvoiceType.CREDIT)

    def _add_item_row(self) -> None:
        self.items_table.blockSignals(True)
        row = self.items_table.rowCount()
        self.items_table.insertRow(row)
        for col, value in enumerate(["", "", "1", "0", "0.00"]):
            cell = QTableWidgetItem(value)
            if col == 4:
                cell.setFlags(cell.flags() & ~Qt.ItemIsEditable)
            self.items_table.setItem(row, col, cell)
        self.items_table.blockSignals(False)
        self._update_totals()

    def _remove_item_row(self) -> None:
        row = self.items_table.currentRow()
        if row >= 0 and self.items_table.rowCount() > 1:
            self.items_table.removeRow(row)
            self._update_totals()

    def _item_drafts(self) -> List[ItemDraft]:
        drafts: List[ItemDraft] = []
        for row in range(self.items_table.rowCount()):
            drafts.append(
                ItemDraft(
                    description_ar=_read_table_text(self.items_table, row, 0),
                    description_en=_read_table_text(self.items_table, row, 1),
                    qty=_to_int(_read_table_text(self.items_table, row, 2)),
                    unit_price=_to_float(_read_table_text(self.items_table, row, 3)),
                )
            )
        return drafts

    def _on_item_changed(self, item: QTableWidgetItem) -> None:
        if item.column() in (2, 3):
            self._update_totals()

    def _update_totals(self) -> None:
        drafts = self._item_drafts()
        self.items_table.blockSignals(True)
        for row, draft in enumerate(drafts):
            cell = self.items_table.item(row, 4)
            if cell is not None:
                cell.setText(format_currency(draft.line_total))
        self.items_table.blockSignals(False)

        totals = compute_totals(drafts, self.tax_spin.value(), self.discount_spin.value())
        self.subtotal_label.setText(format_currency(totals.subtotal))
        self.discount_label.setText(format_currency(totals.discount_amount))
        self.tax_label.setText(format_currency(totals.tax_amount))
        self.total_label.setText(format_currency(totals.total))

    def _reset_new_invoice(self) -> None:
        self.items_table.setRowCount(0)
        self._add_item_row()
        self.new_notes.clear()
        self.discount_spin.setValue(0.0)
        if self.book:
            self.tax_spin.setValue(self.book.settings.get().default_tax_percent)
        else:
            self.tax_spin.setValue(float(config.DEFAULT_SETTINGS["defaultTaxPercent"]))

    def _save_invoice(self) -> None:
        customer_id = self.new_customer.currentData()
        drafts = self._item_drafts()
        errors = validate_invoice_draft(customer_id, drafts)
        if errors:
            QMessageBox.warning(self, "خطأ", "\n".join(errors))
            return

        invoice_type = self.new_type.currentData()
        try:
            invoice = self.book.create_invoice(
                customer_id=customer_id,
                invoice_type=invoice_type,
                items=drafts,
                tax_percent=self.tax_spin.value(),
                discount_percent=self.discount_spin.value(),
                issue_date=self.issue_date.date().toString(Qt.ISODate),
                due_date=self.due_date.date().toString(Qt.ISODate),
                notes=self.new_notes.text().strip() or None,
            )
        except OSError as exc:
            QMessageBox.critical(self, "خطأ", f"حدث خطأ أثناء حفظ الفاتورة: {exc}")
            return

        QMessageBox.information(self, "تم الحفظ", f"تم إنشاء الفاتورة {invoice.number} بنجاح")
        self._reset_new_invoice()
        self.refresh_all()
        self.tabs.setCurrentIndex(2)

    # -- settings --

    def _save_settings(self) -> None:
        try:
            self.book.settings.save_profile(
                self.company_name.text(),
                self.company_address.text(),
                self.company_phone.text(),
                self.default_tax.value(),
            )
        except OSError as exc:
            QMessageBox.critical(self, "خطأ", f"تعذر حفظ الإعدادات: {exc}")
            return
        self._load_settings()
        QMessageBox.information(self, "تم", "تم حفظ الإعدادات")

    def _reset_settings(self) -> None:
        answer = QMessageBox.question(self, "تأكيد", "هل تريد استعادة الإعدادات الافتراضية؟")
        if answer != QMessageBox.Yes:
            return
        try:
            self.book.settings.reset_defaults()
        except OSError as exc:
            QMessageBox.critical(self, "خطأ", f"تعذر حفظ الإعدادات: {exc}")
            return
        self._load_settings()
        self.refresh_all()
