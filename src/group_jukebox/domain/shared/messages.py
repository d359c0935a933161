"""Centralized message constants for error messages, log templates, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Catalog Validation Errors
    BATCH_SOURCE_KIND = "Batch source must be an album or playlist, got {kind}"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_MARKET = "Market must be a two-letter country code, got '{market}'"

    # Catalog Client Errors
    CATALOG_CREDENTIALS_REQUIRED = (
        "CATALOG__CLIENT_ID and CATALOG__CLIENT_SECRET are required for catalog access"
    )
    CATALOG_TOKEN_FAILED = "Failed to obtain catalog access token: HTTP {status}"
    CATALOG_UNEXPECTED_STATUS = "Catalog API returned HTTP {status} for {path}"

    # Device Errors
    DEVICE_NOT_CONFIGURED = "Playback device not configured. Call set_device() first."
    DEVICE_QUEUE_CLOSED = "Device operation queue for '{device}' is closed"
    DEVICE_CALL_TIMEOUT = "Device operation '{operation}' timed out after {timeout}s"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Application Lifecycle
    APP_STARTING = "Starting group-jukebox in {environment} mode"
    LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic config"

    # Catalog Operations
    CATALOG_TOKEN_REFRESHED = "Catalog access token refreshed, valid for %ds"
    CATALOG_REQUEST = "Catalog request %s %s"
    CATALOG_RETRY = "Catalog request %s failed (%s), attempt %d/%d"
    CATALOG_SEARCH = "Catalog search type=%s query=%r limit=%d returned %d items"
    CATALOG_PAGINATED = "Fetched %d tracks for %s in %d pages"
    CATALOG_NULL_ITEMS_SKIPPED = "Skipped %d unavailable tracks in %s"

    # Ranking / Filtering
    RANKING_DONE = "Ranked %d %s candidates for %r, top=%r"
    CANDIDATE_INVALID_URI = "Dropping candidate %r with invalid URI %r"
    BLACKLIST_BLOCKED = "Blocked by blacklist: %s by %s"
    BLACKLIST_PARTITIONED = "Filtering out %d blacklisted tracks from %s"

    # Orchestration: synchronous phase
    ORCHESTRATION_STARTED = "Orchestrating %s of %r (state=%s, queue_items=%s)"
    ORCHESTRATION_STATE_RAW = "Device reported raw state %r, treating as %s"
    ORCHESTRATION_SNAPSHOT_FAILED = "Could not get queue snapshot: %r"
    ORCHESTRATION_DUPLICATE = "Refusing %r: duplicate at position %d (matched by %s)"
    ORCHESTRATION_CLEARING = "Device stopped - making the queue the active source and flushing"
    ORCHESTRATION_FLUSHED = "Queue flushed and ready"
    ORCHESTRATION_FLUSH_FAILED = "Could not flush queue: %r"
    ORCHESTRATION_ENQUEUED = "Enqueued %r (%s)"
    ORCHESTRATION_ENQUEUE_FAILED = "Enqueue failed for %r: %s (device code: %s)"
    ORCHESTRATION_BATCH_ENQUEUED = "Enqueued %d/%d tracks from %r (%d failed)"
    ORCHESTRATION_BATCH_TRACK_FAILED = "Could not enqueue track %r: %r"
    ORCHESTRATION_STATE_AFTER_APPEND = "State after append: %s"
    ORCHESTRATION_STATE_CHECK_FAILED = "Could not check state after append: %r"

    # Orchestration: background phase
    BEST_EFFORT_FAILED = "Best-effort %s failed (ignored): %r"
    QUEUE_READY = "Queue verified: %d items ready"
    QUEUE_NOT_READY = "Queue not ready yet (attempt %d/%d)"
    QUEUE_NEVER_READY = "Queue not ready after %d attempts, attempting playback anyway"
    ACTIVATION_SEEK_OK = "Seeked to first queue position, queue is the active source"
    ACTIVATION_NEXT_OK = "Used skip-next to activate queue"
    ACTIVATION_FAILED = "Queue activation nudge failed, playing anyway"
    PLAYBACK_STARTED = "Started playback from queue"
    PLAYBACK_RESUMED = "Resumed playback"
    PLAYBACK_START_FAILED = "Failed to start playback: %r"
    BACKGROUND_FAILED = "Background continuation for %r failed"

    # Device Operation Queue
    DEVICE_QUEUE_STARTED = "Operation queue for device %r started"
    DEVICE_QUEUE_CLOSED = "Operation queue for device %r closed (%d pending jobs dropped)"
    DEVICE_QUEUE_JOB_FAILED = "Operation %r on device %r failed"
    DEVICE_QUEUE_WAITING = "Operation %r on device %r waiting behind %d jobs"

    # Region warning
    REGION_UNAVAILABLE = "Track %r unavailable in market %s"
    ADMIN_NOTIFY_FAILED = "Could not notify admin channel about %r"

    # Commands
    COMMAND_RECEIVED = "%s from %s: %r"
    COMMAND_CATALOG_FAILED = "Catalog lookup for %r failed: %s"
    SELECTED_SOURCE = "Selected %s: %s by %s"


class UserMessages:
    """User-facing chat replies. Slack/Discord flavoured mrkdwn."""

    # Usage
    ADD_USAGE = "You gotta tell me what to add! Use `add <song name or artist>`"
    APPEND_USAGE = "Tell me what song to append! Use `append <song name>`"
    ALBUM_USAGE = "You gotta tell me which album to add! Try `addalbum <album name>`"
    PLAYLIST_USAGE = "You need to tell me which playlist to add! Use `addplaylist <playlist name>`"
    SEARCH_USAGE = "What should I search for? Try `{command} <query>`"

    # Catalog
    NOTHING_FOUND = (
        "Couldn't find anything matching that. Try different keywords or check the spelling!"
    )
    INVALID_CANDIDATES = "Found tracks but they have invalid format. Try a different search!"
    ALBUM_NOT_FOUND = (
        "Couldn't find that album. Try a Spotify link, or use `searchalbum <name>` to pick one."
    )
    PLAYLIST_NOT_FOUND = (
        "Couldn't find that playlist. Try a Spotify link, or use `searchplaylist <name>` to pick one."
    )
    SEARCH_FAILED = "Couldn't search the catalog right now. Try again in a moment!"

    # Blacklist
    TRACK_BLACKLISTED = "Sorry, *{name}* by {artist} is on the blacklist and cannot be added."
    ALL_BLACKLISTED = "Cannot add {kind} *{name}* - all {count} tracks are blacklisted!"
    SKIPPED_BLACKLISTED = "\nSkipped {count} blacklisted track(s): {names}"
    SKIPPED_MORE = " and {count} more"

    # Orchestration outcomes
    DUPLICATE = (
        "*{name}* by _{artist}_ is already in the queue at position #{position}!\n"
        "Want it to play sooner? Use `vote {position}` to move it up!"
    )
    ADDED = "Added *{name}* by {artist} to the queue!"
    APPENDED = "Added *{name}* by _{artist}_ to the queue!"
    APPENDED_STARTING = " Playback starting!"
    ADDED_BATCH = "Added {what} *{name}* by {artist} to the queue!"
    ADD_FAILED = (
        "Couldn't add the track. It may not be available or there was an error. "
        "Try a different search!"
    )
    BATCH_FAILED = "Couldn't add any tracks from *{name}*. Try again in a moment!"
    BATCH_PARTIAL = "\n{count} track(s) could not be added."
    REGION_UNAVAILABLE = "Track not available in your region. Try searching for different songs!"
    DEVICE_BUSY = "The player is busy with other requests. Try again in a moment!"

    # Admin
    REGION_WARNING = (
        "*Catalog Region Warning*\n"
        'Track "*{name}*" by {artist} failed due to region availability.\n\n'
        "Please verify your catalog region configuration.\n"
        "Current region: *{market}*\n"
        "Available options: {options}\n"
        "Update the CATALOG__MARKET setting."
    )

    # Search listing
    SEARCH_HEADER = "Found *{count} {noun}*:"
    SEARCH_LINE = ">{index}. *{name}* by _{artist}_"
    SEARCH_TRACK_COUNT = " ({count} tracks)"
