from attendance_backend.cli import main

raise SystemExit(main())
