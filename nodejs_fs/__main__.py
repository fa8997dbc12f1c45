from nodejs_fs.pipeline import main

main()
