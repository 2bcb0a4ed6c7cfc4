from students_api.server import main

raise SystemExit(main())
