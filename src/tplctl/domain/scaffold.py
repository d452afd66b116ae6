"""Static scaffold content shipped with the tool.

Nothing here is derived from a template: the skeleton manifest, the
TypeScript compiler baseline, and the fallback ``.gitignore`` are versioned
with tplctl itself.
"""

from __future__ import annotations

from typing import Any

MANIFEST_FILENAME = "package.json"
README_FILENAME = "README.md"
TSCONFIG_FILENAME = "tsconfig.json"
TEMPLATE_DIRNAME = "template"
DESCRIPTOR_FILENAME = "template.json"

# Where a template keeps its own manifest, relative to the template directory.
# The first existing candidate is used.
TEMPLATE_MANIFEST_PATHS = ("src/package.json", "package.json")

APP_NAME_TOKEN = "${appName}"

SKELETON_VERSION = "0.1.0"

# Template ignore files are shipped without the dot so packing doesn't
# rename or drop them; the dotted name is restored on materialization.
IGNORE_FILES: dict[str, str] = {
    "gitignore": ".gitignore",
    "npmignore": ".npmignore",
}

DEFAULT_GITIGNORE = """\
# dependencies
/node_modules
/.pnp
.pnp.js

# build output
/build
/dist
/output
/coverage

# editors
.idea/
.vscode/
*.swp
.DS_Store

# lockfiles
package-lock.json
yarn.lock
pnpm-lock.yaml

# logs
npm-debug.log*
yarn-debug.log*
yarn-error.log*
"""

TSCONFIG: dict[str, Any] = {
    "compilerOptions": {
        "experimentalDecorators": True,
        "module": "CommonJS",
        "target": "es2020",
        "strict": True,
        "jsx": "preserve",
        "importHelpers": True,
        "moduleResolution": "node",
        "skipLibCheck": True,
        "esModuleInterop": True,
        "allowSyntheticDefaultImports": True,
        "sourceMap": True,
        "baseUrl": ".",
        "outDir": "./output",
        "rootDir": ".",
        "types": ["webpack-env", "node"],
        "resolveJsonModule": True,
        "declaration": True,
        "declarationDir": "dist/type",
        "lib": ["esnext", "es5", "ES2016", "ES2020", "dom", "dom.iterable", "scripthost"],
    },
    "include": ["__test__", "src", "src/**/*", "global.d.ts"],
    "exclude": ["node_modules"],
}


def app_skeleton(name: str, *, private: bool) -> dict[str, Any]:
    """The app-layer manifest written before anything is installed."""
    return {
        "name": name,
        "version": SKELETON_VERSION,
        "private": private,
        "devDependencies": {},
        "dependencies": {},
        "eslintConfig": {"extends": []},
    }
