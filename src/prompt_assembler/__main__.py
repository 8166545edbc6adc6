from prompt_assembler.cli import main

raise SystemExit(main())
