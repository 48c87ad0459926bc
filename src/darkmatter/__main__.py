from darkmatter.main import main

main()
