from structurray.compiler.cli import main

raise SystemExit(main())
