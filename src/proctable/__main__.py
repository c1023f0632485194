from proctable.cli import main

main()
