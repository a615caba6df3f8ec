from vue_scaffold.cli import main

raise SystemExit(main())
