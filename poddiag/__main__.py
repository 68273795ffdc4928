from poddiag.apps.cli import main

main()
