"""fdb - quick database cluster deployment on Kubernetes via kbcli/kubectl."""

__version__ = "0.1.0"
