from precisioncg.experiments.runner import main

raise SystemExit(main())
