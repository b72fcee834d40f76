from social_canvas.cli import main

raise SystemExit(main())
