from azure_monitor_samples.cli import main

raise SystemExit(main())
