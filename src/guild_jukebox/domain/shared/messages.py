"""Centralized message constants for error messages, log templates and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Location Errors
    NO_VALID_LOCATION = "no valid YouTube video location"
    ALL_PROVIDERS_FAILED = "all {count} providers failed"
    SURROGATE_NOT_FOUND = "Unable to find a playable version for this track"
    MISSING_YOUTUBE_URL = "Track is missing a YouTube URL"

    # Provider Errors
    PROCESS_EXITED = "extractor exited with code {code} before producing audio"
    PROCESS_NO_OUTPUT = "extractor produced no output"
    PROBE_TIMEOUT = "no audio bytes within {timeout:g}s"
    EMPTY_PROBE = "stream returned no audio bytes"
    NO_AUDIO_FORMAT = "no audio-only format with a direct URL"
    NO_VIDEO_ID = "location has no YouTube video id"
    PLAYABILITY = "video not playable: {status}"
    EXTRACTION_FAILED = "extraction failed: {error}"

    # Settings Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Session Lifecycle
    SESSION_CREATED = "Created playback session for guild %s"
    SESSION_DESTROYED = "Destroyed playback session for guild %s"
    SESSION_REMOVED = "Removed session for guild %s from registry (%d remaining)"
    SESSION_SHUTDOWN = "Shutting down %d playback session(s)"
    SESSION_EVICT_MISMATCH = "Ignoring eviction of stale session for guild %s"
    IDLE_TIMER_ARMED = "Idle timer armed for guild %s (%ss)"
    IDLE_TIMER_FIRED = "Idle timeout reached for guild %s, disconnecting"

    # Voice/Transport Operations
    VOICE_CONNECTED = "Connected to voice channel %s in guild %s"
    VOICE_MOVED = "Moved to voice channel %s in guild %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_ALREADY_IN_CHANNEL = "Already connected to channel %s in guild %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s in guild %s"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_CLEANUP_ERROR = "Error during voice cleanup in guild %s: %r"
    VOICE_SELF_DEAFEN_FAILED = "Failed to self-deafen in guild %s: %r"

    # Playback Operations
    PLAYBACK_STARTED = "Started playing '%s' via %s in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"
    PLAYBACK_FAILED_START = "Failed to start '%s' in guild %s"
    STREAM_ENDED = "Stream ended in guild %s (error: %s)"
    STREAM_END_STALE = "Ignoring stale stream-end signal in guild %s"
    RESOLUTION_CANCELLED = "Cancelled in-flight resolution for '%s' in guild %s"

    # Track Operations
    TRACK_SKIPPED = "Skipped track: %s in guild %s"
    TRACK_DROPPED = "Dropping unplayable track '%s' in guild %s: %s"
    TRACK_SURROGATE = "Resolved %s track '%s' to %s"

    # Queue Operations
    QUEUE_EMPTY = "Queue empty in guild %s"
    QUEUE_ENQUEUED = "Enqueued track '%s' at position %s in guild %s"
    QUEUE_CLEARED = "Cleared %s tracks from queue in guild %s"

    # Provider Chain
    CHAIN_ATTEMPT = "Attempting %s for %s"
    CHAIN_PROVIDER_FAILED = "%s failed: %s"
    CHAIN_PROVIDER_SUCCEEDED = "Streaming via %s (container=%s)"
    CHAIN_EXHAUSTED = "All playback providers failed for '%s'"
    CHAIN_LOCATION_INVALID = "Location %s is not a YouTube video, searching for '%s'"
    CHAIN_LOCATION_RECOVERED = "Recovered location %s for '%s'"
    CHAIN_RECOVERY_FAILED = "Failed to recover a YouTube URL for '%s': %r"

    # Extractor Process
    PROCESS_SPAWNED = "Spawned %s (pid %s) for %s"
    PROCESS_STDERR = "yt-dlp stderr: %s"
    PROCESS_REAPED = "Reaped extractor process %s (exit %s)"
    PROCESS_KILL_FAILED = "Error killing extractor process %s: %r"

    # yt-dlp / Catalog
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info for %s"
    YTDLP_FAILED_SEARCH = "Failed to search for: %s"
    CACHE_HIT_URL = "Cache hit for URL: %s"
    CACHE_EXPIRED_CLEANED = "Cleaned %d expired cache entries"
    SPOTIFY_DISABLED = "Spotify credentials not set; Spotify lookups are disabled"
    SPOTIFY_TRACK_FETCHED = "Fetched Spotify track: %s"
    SPOTIFY_LOOKUP_FAILED = "Failed to fetch Spotify track %s"
    SPOTIFY_SEARCH_FAILED = "Spotify search failed for: %s"

    # Bot Lifecycle
    BOT_STARTING = "Starting bot in {environment} mode"
    BOT_STARTING_RUN = "Connecting to Discord"
    BOT_SETUP = "Running bot setup hook"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_READY = "Logged in as %s (%s)"
    BOT_SHUTTING_DOWN = "Shutting down bot"
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SYNCED_COMMANDS = "Synced %d application commands%s"
    BOT_SYNC_FAILED = "Failed to sync application commands: %r"
    COMMAND_ERROR = "Error handling /%s: %r"


class DiscordUIMessages:
    """User-facing texts for the slash-command front end."""

    # State / guards
    STATE_SERVER_ONLY = "This command is for servers only."
    STATE_NEED_TO_BE_IN_VOICE = "You need to be in a voice channel to use this command."
    STATE_SAME_CHANNEL_REQUIRED = (
        "You must be in the same voice channel as the bot to use this command."
    )

    # Play
    PLAY_NO_RESULTS = "No results found for **{query}**."
    PLAY_QUEUED = "Queued **{title}** from {source}"
    PLAY_CONNECT_TIMEOUT = "Could not connect to your voice channel. Please try again."
    PLAY_RESOLVE_FAILED = "Couldn't find a playable version of **{title}**."

    # Controls
    PAUSED = "Paused playback."
    NOTHING_TO_PAUSE = "Nothing is playing."
    RESUMED = "Resumed playback."
    NOTHING_TO_RESUME = "Nothing to resume."
    SKIPPED = "Skipped **{title}**."
    NOTHING_TO_SKIP = "Nothing to skip."
    STOPPED = "Stopped playback and cleared the queue."
    LEFT = "Left the voice channel."
    NOT_CONNECTED = "I'm not in a voice channel."

    # Queue
    CLEARED = "Cleared {count} upcoming track(s)."
    CLEAR_NOTHING = "Queue is already empty."
    QUEUE_EMPTY = "Queue is empty."
    QUEUE_TITLE = "Queue"
    QUEUE_NOW_PLAYING = "Now Playing"
    QUEUE_LINE = "{index}. {title} ({duration})"
    QUEUE_MORE = "+{count} more"
    QUEUE_PAUSED_SUFFIX = " (paused)"

    ERROR_GENERIC = "Something went wrong while handling that command."
