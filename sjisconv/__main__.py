from sjisconv.cli import main

raise SystemExit(main())
