from fano.cli import main

raise SystemExit(main())
