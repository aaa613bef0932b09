from vendordeps.cli import main

main()
