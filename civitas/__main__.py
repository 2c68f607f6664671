from civitas.main import main

main()
