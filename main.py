import getpass
import logging
import re
import sys
import tkinter as tk
from tkinter import Frame, Label, X

from core.config.config_service import config_service
from core.logging.logic.logger import logger
from core.settings.logic.settings_manager import settings_manager
from signaturepad.logic.signature_service import SignatureService
from signaturepad.gui.signature_view import SignatureView


class MainWindow(tk.Tk):
    def __init__(self, owner_id: str):
        super().__init__()

        self.title(config_service.general.app_name or "SignaturePad")
        self.resizable(False, False)

        self.service = SignatureService(settings_manager=settings_manager, logger=logger)

        # Display area (centre)
        self.display_area = Frame(self)
        self.display_area.pack(fill="both", expand=True)

        # Status bar (bottom)
        self.status_bar = Label(self, text="", anchor="w", bg="#eeeeee")
        self.status_bar.pack(side="bottom", fill=X)

        self.view = SignatureView(self.display_area, service=self.service, owner_id=owner_id)
        self.view.pack(fill="both", expand=True)
        self.set_status(f"Signatures stored in {self.service.signature_dir}")

    def set_status(self, message):
        """Update the status bar."""
        self.status_bar.config(text=message)


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.DEBUG if "--debug" in argv else logging.INFO)
    owner = next((a for a in argv if not a.startswith("--")), None) or getpass.getuser()
    owner = re.sub(r"[^A-Za-z0-9_.@-]", "_", owner)
    app = MainWindow(owner)
    app.mainloop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
