"""cordova-sync — keep config.xml, package.json and the platforms/plugins on disk in step."""

__version__ = "0.1.0"
