from matte_app.cli import main

raise SystemExit(main())
