# order_tracker/views/login_dialog.py
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QLineEdit, QPushButton, QFrame, QMessageBox
)
from PySide6.QtCore import Qt

from order_tracker.services.api_client import ApiError
from order_tracker.services.auth_service import AuthService


class LoginDialog(QDialog):
    def __init__(self, auth: AuthService, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Supplier Tracker – Sign in")
        self.resize(520, 480)
        self.setMinimumSize(420, 400)

        self.auth = auth
        self.session = None

        self.setStyleSheet("""
            QDialog { background: #f3f4f6; font-family: 'Segoe UI', Arial, sans-serif; }
            QFrame#Card { background: rgba(255,255,255,0.96); border-radius: 14px; padding: 32px; }
            QLabel#Title { font-size: 30px; font-weight: 800; color: #111827; }
            QLabel#Sub { color:#6b7280; font-size: 14px; margin: 8px 0 24px; }
            QLineEdit { padding: 12px; font-size: 14px; border:1px solid #d1d5db; border-radius:8px; background:#fff; }
            QLineEdit:focus { border-color: #2563eb; }
            QPushButton { padding: 12px 16px; border-radius:10px; font-weight:600; }
            QPushButton#Primary { background:#2563eb; color:#fff; }
            QPushButton#Primary:hover { background:#1d4ed8; }
            QPushButton#Primary:disabled { background:#93c5fd; }
            QPushButton#Ghost { background:transparent; color:#2563eb; text-decoration: underline; }
            QLabel#Error { color:#dc2626; font-size:13px; padding:8px; background:#fef2f2; border-radius:8px; }
        """)

        root = QVBoxLayout(self)
        root.setContentsMargins(20, 20, 20, 20)

        card = QFrame(objectName="Card")
        v = QVBoxLayout(card)
        v.setSpacing(16)

        title = QLabel("Sign in", objectName="Title", alignment=Qt.AlignCenter)
        sub = QLabel("Supplier order tracker", objectName="Sub", alignment=Qt.AlignCenter)
        v.addWidget(title)
        v.addWidget(sub)

        self.edt_email = QLineEdit(placeholderText="Email")
        self.edt_pass = QLineEdit(placeholderText="Password")
        self.edt_pass.setEchoMode(QLineEdit.Password)
        v.addWidget(self.edt_email)
        v.addWidget(self.edt_pass)

        self.lbl_msg = QLabel("", alignment=Qt.AlignCenter, objectName="Error")
        self.lbl_msg.setWordWrap(True)
        self.lbl_msg.hide()
        v.addWidget(self.lbl_msg)

        self.btn_login = QPushButton("Sign in", objectName="Primary")
        v.addWidget(self.btn_login)

        btn_clear = QPushButton("Clear saved session", objectName="Ghost")
        v.addWidget(btn_clear)

        root.addStretch(1)
        root.addWidget(card, alignment=Qt.AlignCenter)
        root.addStretch(1)

        self.btn_login.clicked.connect(self._do_login)
        self.edt_pass.returnPressed.connect(self._do_login)
        btn_clear.clicked.connect(self._clear_session)

    def show_error(self, msg: str):
        self.lbl_msg.setText(msg or "")
        self.lbl_msg.setVisible(bool(msg))

    def _clear_session(self):
        self.auth.sign_out()
        QMessageBox.information(self, "Session", "Session cleared.")

    def _do_login(self):
        self.show_error("")
        self.btn_login.setEnabled(False)
        try:
            self.session = self.auth.sign_in_with_password(self.edt_email.text(), self.edt_pass.text())
        except ApiError as e:
            self.show_error(str(e))
            return
        finally:
            self.btn_login.setEnabled(True)
        self.accept()
