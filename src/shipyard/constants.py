"""Well-known environment keys and workspace file names."""

# environment keys
IMAGE = "IMAGE"
REGISTRY = "REGISTRY"
APP_NAME = "APP_NAME"
VERSION = "VERSION"
JAVA_HOME = "JAVA_HOME"
JAVA_OPTS = "JAVA_OPTS"
BUILD_NUMBER = "BUILD_NUMBER"
DATE = "DATE"
NAMESPACE = "NAMESPACE"
PORT = "PORT"
REPLICAS = "REPLICAS"
MEMORY = "MEMORY"
NODE_POOL = "NODE_POOL"
K8S_SERVICE_NAMESPACE = "K8S_SERVICE_NAMESPACE"
K8S_SERVICE_NAME = "K8S_SERVICE_NAME"
K8S_SERVICE_PORT = "K8S_SERVICE_PORT"
GIT_AUTHOR = "GIT_AUTHOR"
GIT_BRANCH = "GIT_BRANCH"

DATE_FORMAT = "%Y%m%d%H%M%S"

# workspace files
BUILD_INFO_FILE = "dockerBuildInfo"
GIT_PROPERTIES_FILE = "git.properties"
GIT_PROPERTY_BRANCH = "git.branch"
GIT_PROPERTY_AUTHOR = "git.commit.user.name"
