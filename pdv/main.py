"""Entry point for the PDV Textual app."""

from __future__ import annotations

from pdv.pos_app import PdvApp


def main() -> None:
    """Run the Textual application."""
    PdvApp().run()


if __name__ == "__main__":
    main()
