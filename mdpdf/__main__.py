from mdpdf.cli import main

main()
