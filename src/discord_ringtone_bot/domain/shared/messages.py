"""Centralized message constants for error messages, log templates, and user replies."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_RINGTONE_EXTENSION = "Ringtone extension must be alphanumeric, e.g. 'mp3'"

    # Registry Errors
    SESSION_MISSING = "No voice session for guild {guild_id} where one was expected"

    # Resolver Errors
    RESOLVE_NOT_FOUND = "Audio source not found: {identifier}"
    RESOLVE_NETWORK_FAILURE = "Network failure resolving {identifier}: {reason}"
    RESOLVE_UNSUPPORTED_FORMAT = "Unsupported audio format for {identifier}"
    RESOLVE_TIMEOUT = "Timed out after {timeout}s"
    UNSUPPORTED_IDENTIFIER = "Unsupported audio identifier type: {kind}"

    # Voice Transport Errors
    JOIN_FAILED = "Could not connect to channel {channel_id} in guild {guild_id}"

    # Authentication/Bootstrap Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Voice/Audio Operations
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_CONNECT_FAILED = "Failed to connect to voice"
    VOICE_DISCONNECT_FAILED = "Failed to disconnect from voice"
    VOICE_MOVE_FAILED = "Failed to move to channel"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_MOVED = "Moved to voice channel %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_MOVE_TIMEOUT = "Timeout moving to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_NOT_CONNECTED = "Not connected to voice in guild %s"
    VOICE_STATE_CHANGE_FAILED = "Failed to update voice state in guild %s: %r"

    # Playback Operations
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"
    PLAYBACK_FAILED_START = "Failed to start playback: %s"
    PLAYBACK_ENDED = "Playback of '%s' ended in guild %s (error: %s)"
    PLAYBACK_CALLBACK_ERROR = "Error in playback end callback for guild %s: %s"
    PLAYBACK_DISCARDED = "Discarding resolved stream '%s': guild %s is no longer connected"

    # Session State Machine
    SESSION_JOINED = "Session created in guild %s, channel %s"
    SESSION_MOVED = "Session in guild %s moved from channel %s to %s"
    SESSION_LEFT = "Session in guild %s removed"
    SESSION_AUTO_LEAVE = "No humans left in channel %s, leaving guild %s"
    SESSION_MUTE_CHANGED = "Session in guild %s muted=%s"
    SESSION_PLAYBACK_SET = "Session in guild %s now playing %s"
    SESSION_PLAYBACK_IDLE = "Session in guild %s playback idle"
    SESSION_JOIN_FAILED = "Could not join channel %s in guild %s"
    GREETING_FAILED = "Greeting for %s in guild %s failed: %s"
    REGISTRY_INVARIANT_BROKEN = "Registry invariant broken: %s"

    # Resolution
    RESOLVE_FAILED = "Failed to resolve %s: %s"
    RESOLVE_TIMEOUT = "Resolving %s timed out after %ss"
    CACHE_HIT_URL = "Cache hit for URL: %s"
    CACHE_EXPIRED_CLEANED = "Cleaned %d expired cache entries"
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    RINGTONE_RESOLVED = "Resolved greeting %s to %s"

    # Ringtone storage
    RINGTONE_SAVED = "Saved ringtone %s"
    RINGTONE_DELETED = "Deleted ringtone %s"
    RINGTONE_IO_FAILED = "Ringtone file operation failed for %s: %r"

    # Commands / Replies
    COMMAND_RECEIVED = "Command %s from user %s in guild %s"
    COMMAND_FAILED = "Command %s failed"
    COMMAND_RESOLVE_FAILED = "Command %s could not resolve audio: %s"
    COMMAND_JOIN_FAILED = "Command %s could not join voice: %s"
    COMMAND_STORAGE_FAILED = "Command %s storage failure: %s"
    REPLY_SEND_FAILED = "Error sending message to channel %s: %r"
    REPLY_CHANNEL_NOT_FOUND = "Reply channel %s not found"

    # Application Lifecycle
    BOT_STARTING = "Starting Discord Ringtone Bot in {environment} mode"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"

    # Bot Cog Management
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COGS_LOADED_SUMMARY = "Cogs loaded: %s success, %s failed"


class DiscordUIMessages:
    """User-facing reply texts."""

    # Context / precondition
    STATE_DMS_NOT_SUPPORTED = "Groups and DMs not supported"
    STATE_NOT_IN_VOICE = "Not in a voice channel"
    STATE_NOT_IN_VOICE_TO_PLAY = "Not in a voice channel to play in"
    STATE_NOT_IN_VOICE_TO_UNMUTE = "Not in a voice channel to unmute in"
    STATE_USER_NOT_IN_VOICE = "Not in a voice channel"

    # Arguments
    ERROR_URL_REQUIRED = "Must provide a URL to a video or audio"
    ERROR_URL_INVALID = "Must provide a valid URL"

    # Actions
    ACTION_JOINED = "Joined <#{channel_id}>"
    ACTION_LEFT = "Left voice channel"
    ACTION_MUTED = "Now muted"
    ACTION_ALREADY_MUTED = "Already muted"
    ACTION_UNMUTED = "Unmuted"
    ACTION_ALREADY_UNMUTED = "Already unmuted"
    ACTION_PLAYING = "Playing song"
    ACTION_PONG = "Pong!"

    # Ringtone storage
    RINGTONE_SAVED = "Saved {path}"
    RINGTONE_DELETED = "Deleted {path}"
    RINGTONE_NO_ATTACHMENT = "Attach a .{extension} file to the upload command"
    RINGTONE_BAD_EXTENSION = "Only .{extension} files are supported"
    RINGTONE_TOO_LARGE = "File is too large (limit {limit_kb} KB)"
    RINGTONE_NOT_FOUND = "Specified file does not exist"
    RINGTONE_DOWNLOAD_FAILED = "Error downloading attachment"
    RINGTONE_SAVE_FAILED = "Error creating file"
    RINGTONE_DELETE_FAILED = "Error deleting file"

    # Errors
    ERROR_JOINING = "Error joining the channel"
    ERROR_SOURCE_NOT_FOUND = "Could not find that audio source"
    ERROR_SOURCE_NETWORK = "Error sourcing ffmpeg"
    ERROR_SOURCE_UNSUPPORTED = "That source is not a supported audio format"
    ERROR_COMMAND_FAILED_SEE_LOGS = "Command failed. See logs."

    HELP_TEXT = (
        "**Ringtone Bot**\n"
        "Commands: join, leave, mute, unmute, play <url>, ping, upload, delete, help\n"
        "Usage: {prefix}[command]\n"
        "Greetings play automatically when you enter a voice channel.\n"
        "To set yours, send {prefix}upload as the comment of a .{extension} attachment."
    )
