"""Default names and sentinels shared across bitpm."""

DEFAULT_BOX_NAME = "global"
DEFAULT_IMPL_NAME = "impl.js"
DEFAULT_SPECS_NAME = "spec.js"
DEFAULT_BIT_VERSION = 1
DEFAULT_LICENSE_FILENAME = "LICENSE"
DEFAULT_DIST_DIRNAME = "dist"

# Written to the project config when a component has no compiler/tester
NO_PLUGIN_TYPE = "none"

BIT_CONFIG_FILENAME = "bit.yaml"
