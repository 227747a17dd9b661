from clusterconf.cli.app import app

app()
