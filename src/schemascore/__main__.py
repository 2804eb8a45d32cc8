from schemascore.cli import main

main()
