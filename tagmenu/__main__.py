"""Allow ``python -m tagmenu``."""

from __future__ import annotations

from tagmenu.cli import main

raise SystemExit(main())
