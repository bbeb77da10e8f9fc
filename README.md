# mmoclient

A client for a tile-based online role-playing game. It speaks the game's
binary packet protocol over TCP, loads the world map from a compact binary
file, and draws the title, login, character creation and game screens with
pygame.

## Installing

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Playing

```
mmoclient
```

Options:

- `--address ADDRESS` – the server to connect to. When it is left out the
  client asks for it on the terminal; an empty answer means `127.0.0.1`.
- `--developer` – ignore the movement and attack cooldowns.
- `--map PATH` – the binary map file (default `../Resource/map.bin`).
- `--font PATH` – the font file (default `Resource/Font/neodgm.ttf`).
- `--textures PATH` – the texture manifest (default
  `Resource/Texture/TextureSet.json`).

The client loads the font and every texture in the manifest before it opens
the window; if any of them cannot be loaded it prints why and exits with
status 1. It then connects on port 8252 and shows the title screen.

On the title screen Up and Down choose between Start and Exit, and Enter
confirms. On the login screen type a name (printable ASCII, up to 20
characters) and press Enter. If the server does not know the name, the
character creation screen opens: Left and Right choose warrior, rogue or
sorcerer, and Enter registers the character.

In the game:

- Arrow keys move; A, S and D attack in the facing direction.
- Numpad 4, 6, 8 and 2 turn without moving.
- E interacts with whatever stands nearby.
- T opens the chat box, Enter sends, Escape closes it. The last ten
  messages are shown while the box is open.
- `/tp x y` typed in chat asks the server for a teleport.
- When the server offers to make the current place the respawn point, Left
  and Right choose Yes or No, Enter answers and Escape dismisses.
- After dying, R asks to respawn.

Outside developer mode, movement and attacks are held to their cooldowns
(half a second for moving; one, five and twenty seconds for the A, S and D
attacks).

### Resources

The texture manifest is a JSON file of the form

```json
{"textures": [{"key": "player", "path": "Resource/Texture/player.png"}]}
```

The screens look up textures under these keys: `button_big`,
`warrior_big`, `rogue_big`, `sorcerer_big`, `player`, `grass`, `water`,
`house`, `tree`, `warrior`, `rogue`, `sorcerer`, `grave`, `monster`,
`slime`, `nepenthes`, `dog`, `bear`, `hello`, `knight`, `action`,
`standard_atk`, `warrior_s`, `rogue_s`, `sorcerer_s`, `fixed_a`, `agro_a`,
`neut_a` and `knight_a`.

## Preparing a map

Maps made in a tile editor and saved as JSON (with `width`, `height` and a
first layer holding `data`) are turned into the client's binary map file by:

```
mmoclient-export-map my_tile.json map.bin
```

Both arguments are optional and default to `my_tile.json` and `map.bin`.
The binary file holds the width and height as little-endian 32-bit integers
followed by one byte per tile, row by row; tile values 1 to 4 are grass,
water, house and tree.

## Using the library

The pieces work on their own as well:

- `mmoclient.protocol` has a dataclass for every packet (`LoginAllow`,
  `Enter`, `ChatRequest`, `Damage` and the rest) with `encode()` and
  `decode(data)`; `split_packets` cuts a buffer of back-to-back packets
  apart and `decode_packet` decodes any known packet. Bad input raises
  `ProtocolError`.
- `mmoclient.legacy_protocol` encodes and decodes the older packet
  layouts (`AvatarInfo`, `LegacyChat`, `KeyInput`, `MoveUser` and others).
- `mmoclient.framing.PacketBuffer.feed` collects partial reads and returns
  only whole packets; `Connection` wraps the socket (`connect`, `send`,
  `recv`, `close`) and can be used as a context manager.
- `mmoclient.stats` holds `BaseStats` (eight 16-bit values that wrap on
  addition), `basic_stats(level)` and `need_exp_to_level_up(level)`.
- `mmoclient.mapfile.WorldMap` loads maps and answers which tiles lie
  inside the map and which are in view of a position; `export_json_map`
  does the JSON conversion.
- `mmoclient.resources.ResourceRegistry` loads resources by key, singly or
  from a JSON manifest; `texture_registry()` and `font_registry()` return
  the shared ones.
- `mmoclient.animation` describes sprite-sheet animations per object
  (`Animation`, `AnimationSet`, `AnimationManager`).
- `mmoclient.epoch.EpochBasedReclamation` recycles objects between threads
  once no thread can still see them; each thread first calls
  `set_thread_id` with its slot, and recycled objects must offer a
  `reset` method.

## What it does not do

- There is no game server here; the client needs one to talk to.
- No fonts, textures or maps are included; they must be supplied as
  described above.
- Animation descriptions are stored but not played: creatures are drawn
  as still sprites.