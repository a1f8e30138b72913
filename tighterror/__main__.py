from tighterror.compiler.cli import main

raise SystemExit(main())
