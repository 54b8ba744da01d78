from scaffold_cli import main

main()
