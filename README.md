# claudeup

`claudeup` is a command-line tool for keeping a Claude Code installation in
good shape. It reads the plugin and marketplace registries that Claude Code
keeps under its configuration directory, reports on what is installed, finds
plugins whose paths have gone stale, and can fix or remove them. It also
remembers plugins and MCP servers you have switched off, so you can switch
them back on later without reinstalling anything.

It needs nothing beyond the Python standard library (Python 3.10 or later).
Update checks call `git`, which must be on your `PATH`.

## Where it looks

By default the Claude Code directory is `~/.claude`. If the
`CLAUDE_CONFIG_DIR` environment variable is set, that directory is used
instead. The global option `--claude-dir <path>`, given before the command
name, overrides both:

```
claudeup --claude-dir /path/to/.claude status
```

Inside that directory the tool reads and writes:

- `plugins/installed_plugins.json`: the installed plugin registry. Both the
  older single-entry format and the newer per-scope format are understood;
  the file is always written back in the newer format.
- `plugins/known_marketplaces.json`: the known marketplace repositories.

Its own settings (disabled plugins, disabled MCP servers and preferences)
live in `~/.claudeup/config.json`, which is created with defaults the first
time it is needed.

The global option `-y` / `--yes`, also given before the command name, skips
every prompt and accepts the default answer. `--version` prints the
installed version.

## Commands

Get an overview of the installation (marketplaces, plugin counts, the active
profile name recorded in the settings file, and plugins with stale paths):

```
claudeup status
```

Run diagnostics on marketplaces and plugin paths:

```
claudeup doctor
```

The doctor separates plugins whose path is only missing a known
subdirectory (for example a `plugins/` or `skills/` level inside a
marketplace checkout), which can be corrected automatically, from plugins
whose directory is simply gone. Missing registry files are treated as an
empty installation.

Fix what can be fixed and remove what cannot:

```
claudeup cleanup
claudeup cleanup --dry-run
claudeup cleanup --fix-only
claudeup cleanup --remove-only
claudeup cleanup --reinstall
```

Each step asks for confirmation first (an empty answer means no).
`--fix-only` and `--remove-only` cannot be combined. `--reinstall` prints
the commands needed to reinstall any entries that were removed.

List installed plugins, in full or as a summary:

```
claudeup plugins
claudeup plugins --summary
```

Switch a plugin off and on again. Its metadata is kept in the settings file
while it is disabled, and `enable` only works for plugins disabled this way:

```
claudeup disable hookify@claude-code-plugins
claudeup enable hookify@claude-code-plugins
```

List known marketplaces:

```
claudeup marketplace list
```

Record a single MCP server as disabled or enabled, without touching the
plugin that provides it. Servers are named as `plugin-name:server-name`:

```
claudeup mcp disable compound-engineering@every-marketplace:playwright
claudeup mcp enable compound-engineering@every-marketplace:playwright
```

Claude Code may need a restart before MCP changes take effect.

Check marketplaces and plugins for newer commits, and apply the ones you
choose:

```
claudeup update
claudeup update --check-only
```

When updates are found you are asked which to apply: enter numbers
separated by commas, `all` (the default) or `none`. Updating a marketplace
runs a fast-forward `git pull` in its checkout. Updating a cached plugin
copies the newer version from its marketplace into the plugin's install
path; every updated plugin has its new commit recorded in the registry.

## Using it from Python

The modules can also be used directly:

- `claudeup.plugins`: `load_plugins`, `save_plugins`, `PluginRegistry` and
  `PluginMetadata`.
- `claudeup.marketplaces`: `load_marketplaces`, `save_marketplaces`,
  `MarketplaceMetadata` and `MarketplaceSource`.
- `claudeup.config`: `load_config`, `save_config`, `default_config` and
  `GlobalConfig`.
- `claudeup.diagnostics`: `analyze_path_issues`, `expected_path` and
  `run_doctor`.
- `claudeup.updates`: `check_marketplace_updates`, `check_plugin_updates`,
  `update_marketplace`, `update_plugin` and `copy_dir`.
- `claudeup.versions`: `parse_version`, `is_version_outdated` and
  `claude_version`, for reading and comparing Claude CLI version strings.

## What it does not do

- It does not list the MCP servers that plugins provide; `mcp` only has
  `disable` and `enable`, which record a server name in the settings file.
- It has no profiles: it cannot save, switch between or apply sets of
  plugins, marketplaces and MCP servers. It only shows the active profile
  name if one is recorded in the settings file.
- It does not install plugins, marketplaces or the Claude CLI itself, and
  has no first-time setup command.
- It does not run Claude Code in a container or sandbox.

## Exit status

Commands exit with status 0 on success. On failure the error is printed to
standard error prefixed with `Error:` and the exit status is 1. Invalid
command-line usage exits with status 2.