import gifboard


def main() -> None:
    # Attaches to GIFBOARD_URL if it points at a live server, otherwise starts one.
    target = gifboard.run(port=0)
    client = target.client("gifs", identity="alice")

    if client.refresh() is gifboard.UNINITIALIZED:
        client.ensure_initialized()

    idx = client.submit("https://media.giphy.com/media/L71a8LW2UrKwPaWNYM/giphy.gif")
    client.upvote(idx)
    client.upvote(idx)
    client.downvote(idx)

    view = client.current_view()
    for i, entry in enumerate(view.entries):
        print(i, entry.score, entry.link, entry.submitter)


if __name__ == "__main__":
    main()
